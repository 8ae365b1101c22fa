from app.core import db


def test_models_registered_with_aerich():
    models = db.TORTOISE_ORM["apps"]["models"]["models"]
    assert models == [
        "app.models.user",
        "app.models.appointment",
        "app.models.hotline",
        "app.models.chat",
        "aerich.models",
    ]
    assert db.TORTOISE_ORM["use_tz"] is True
    assert db.TORTOISE_ORM["timezone"] == "UTC"


def test_schema_generation_is_opt_in(monkeypatch):
    monkeypatch.delenv("DB_GENERATE_SCHEMAS", raising=False)
    assert db._generate_schemas_enabled() is False
    monkeypatch.setenv("DB_GENERATE_SCHEMAS", "true")
    assert db._generate_schemas_enabled() is True
