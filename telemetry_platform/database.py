"""
Database configuration from the environment.

``DATABASE_URL`` wins when set (the usual form on hosted PostgreSQL); hosted
PostgreSQL connections default to ``sslmode=require`` unless the URL or
``TELEMETRY_DB_SSL_REQUIRE`` says otherwise. Without a URL, the discrete
``TELEMETRY_DB_*`` variables are used, defaulting to a local SQLite file.
"""

POSTGRES_ENGINES = (
    "django.db.backends.postgresql",
    "django.contrib.gis.db.backends.postgis",
)


def database_from_env(env, base_dir):
    if "DATABASE_URL" in env:
        config = env.db("DATABASE_URL")
        if config["ENGINE"] in POSTGRES_ENGINES and env.bool(
            "TELEMETRY_DB_SSL_REQUIRE", default=True
        ):
            config.setdefault("OPTIONS", {}).setdefault("sslmode", "require")
        return config

    return {
        "ENGINE": env.str("TELEMETRY_DB_ENGINE", default="django.db.backends.sqlite3"),
        "NAME": env.str("TELEMETRY_DB_NAME", default=str(base_dir / "telemetry.sqlite3")),
        "USER": env.str("TELEMETRY_DB_USER", default=""),
        "PASSWORD": env.str("TELEMETRY_DB_PASSWORD", default=""),
        "HOST": env.str("TELEMETRY_DB_HOST", default=""),
        "PORT": env.str("TELEMETRY_DB_PORT", default=""),
    }
