"""Tests for configuration selection via APP_ENV."""
import pytest

from app.config import (
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    get_config_class,
)


def test_testing_config_uses_memory_db(monkeypatch):
    monkeypatch.setenv('APP_ENV', 'testing')
    cfg = get_config_class()
    assert cfg is TestingConfig
    assert cfg.TESTING is True
    assert cfg.SQLALCHEMY_DATABASE_URI.startswith('sqlite://')
    assert cfg.RATELIMIT_ENABLED is False


def test_development_is_default(monkeypatch):
    monkeypatch.delenv('APP_ENV', raising=False)
    cfg = get_config_class()
    assert cfg is DevelopmentConfig
    assert cfg.DEBUG is True


def test_production_requires_secrets(monkeypatch):
    monkeypatch.setenv('APP_ENV', 'production')
    for key in ('SECRET_KEY', 'DATABASE_URL', 'JWT_SECRET', 'OWNER_ADMIN_EMAIL'):
        monkeypatch.delenv(key, raising=False)
    with pytest.raises(RuntimeError) as exc:
        get_config_class()
    assert 'OWNER_ADMIN_EMAIL' in str(exc.value)


def test_production_with_secrets(monkeypatch):
    monkeypatch.setenv('APP_ENV', 'production')
    monkeypatch.setenv('SECRET_KEY', 's')
    monkeypatch.setenv('DATABASE_URL', 'postgresql://db/identity')
    monkeypatch.setenv('JWT_SECRET', 'j')
    monkeypatch.setenv('OWNER_ADMIN_EMAIL', 'owner@storefront.example')
    assert get_config_class() is ProductionConfig


def test_app_uses_owner_email_from_config(app):
    assert app.config['OWNER_ADMIN_EMAIL'] == 'owner@storefront.test'
