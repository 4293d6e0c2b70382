from hotel_api.config import Settings


def test_defaults(monkeypatch):
    for name in ("RECAPTCHA_SECRET_KEY", "VERIFICATION", "CORS_ORIGINS", "PORT", "MONGO_DB"):
        monkeypatch.delenv(name, raising=False)
    s = Settings.from_env()
    assert s.port == 3000
    assert s.mongo_db == "hotel_devang"
    assert s.verification_enabled is False
    assert s.cors_origins == ["*"]
    assert s.cors_restricted is False


def test_secret_turns_verification_on(monkeypatch):
    monkeypatch.delenv("VERIFICATION", raising=False)
    monkeypatch.setenv("RECAPTCHA_SECRET_KEY", "s3cret")
    assert Settings.from_env().verification_enabled is True

    monkeypatch.setenv("VERIFICATION", "off")
    assert Settings.from_env().verification_enabled is False


def test_cors_allow_list(monkeypatch):
    monkeypatch.setenv(
        "CORS_ORIGINS", "https://hoteldevang.com, https://www.hoteldevang.com"
    )
    s = Settings.from_env()
    assert s.cors_origins == ["https://hoteldevang.com", "https://www.hoteldevang.com"]
    assert s.cors_restricted is True


def test_cors_restricted_origin(make_client):
    client = make_client(cors_origins=["https://hoteldevang.com"])
    ok = client.get("/", headers={"Origin": "https://hoteldevang.com"})
    other = client.get("/", headers={"Origin": "https://evil.example"})
    assert ok.headers.get("access-control-allow-origin") == "https://hoteldevang.com"
    assert "access-control-allow-origin" not in other.headers
