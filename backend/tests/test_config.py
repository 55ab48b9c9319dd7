import pytest

from app.core.config import Settings

ENV_VARS = [
    "APP_HOST",
    "APP_PORT",
    "AWS_BUCKET_NAME",
    "AWS_ACCESS_KEY_ID",
    "AWS_SECRET_ACCESS_KEY",
    "AWS_REGION",
    "AWS_BUCKET_PATH",
    "UPLOAD_KEY_PREFIX",
    "UPLOAD_FIELD_NAME",
    "UPLOAD_MAX_FILE_SIZE",
    "CORS_ORIGINS",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    settings = Settings(_env_file=None)
    assert settings.app_port == 5000
    assert settings.app_host == "0.0.0.0"
    assert settings.upload_key_prefix == "saskengallery"
    assert settings.upload_field_name == "image"
    assert settings.upload_max_file_size == 11_000_000
    assert settings.cors_origins == ["*"]


def test_reads_aws_and_upload_variables(clean_env):
    clean_env.setenv("APP_PORT", "8080")
    clean_env.setenv("AWS_BUCKET_NAME", "gallery-bucket")
    clean_env.setenv("AWS_ACCESS_KEY_ID", "AKIDEXAMPLE")
    clean_env.setenv("AWS_SECRET_ACCESS_KEY", "secret")
    clean_env.setenv("AWS_REGION", "ap-south-1")
    clean_env.setenv("AWS_BUCKET_PATH", "https://gallery-bucket.s3.ap-south-1.amazonaws.com")
    clean_env.setenv("UPLOAD_KEY_PREFIX", "gallery")
    clean_env.setenv("UPLOAD_FIELD_NAME", "photo")
    clean_env.setenv("UPLOAD_MAX_FILE_SIZE", "5000000")

    settings = Settings(_env_file=None)

    assert settings.app_port == 8080
    assert settings.aws_bucket_name == "gallery-bucket"
    assert settings.aws_access_key_id == "AKIDEXAMPLE"
    assert settings.aws_secret_access_key == "secret"
    assert settings.aws_region == "ap-south-1"
    assert settings.aws_bucket_path == "https://gallery-bucket.s3.ap-south-1.amazonaws.com"
    assert settings.upload_key_prefix == "gallery"
    assert settings.upload_field_name == "photo"
    assert settings.upload_max_file_size == 5_000_000


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("https://gallery.example.com", ["https://gallery.example.com"]),
        (
            "https://gallery.example.com, http://localhost:3000",
            ["https://gallery.example.com", "http://localhost:3000"],
        ),
        ('["https://a.example.com", "https://b.example.com"]', ["https://a.example.com", "https://b.example.com"]),
        ("*", ["*"]),
    ],
)
def test_cors_origins_formats(clean_env, raw, expected):
    clean_env.setenv("CORS_ORIGINS", raw)
    assert Settings(_env_file=None).cors_origins == expected
