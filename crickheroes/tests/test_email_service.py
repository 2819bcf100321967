"""
Tests for email_service with a mocked SendGrid client.
"""

from unittest.mock import MagicMock, patch

from crickheroes.services import email_service


class TestSendEmail:
    def test_disabled_email_is_skipped(self, monkeypatch):
        monkeypatch.setattr(email_service, "ENABLE_EMAIL", False)
        with patch("crickheroes.services.email_service.SendGridAPIClient") as mock_client:
            assert email_service.send_email("alex@example.com", "Hi", "<p>Hi</p>") is True
            mock_client.assert_not_called()

    def test_missing_api_key_is_skipped(self, monkeypatch):
        monkeypatch.setattr(email_service, "ENABLE_EMAIL", True)
        monkeypatch.setattr(email_service, "SENDGRID_API_KEY", None)
        with patch("crickheroes.services.email_service.SendGridAPIClient") as mock_client:
            assert email_service.send_email("alex@example.com", "Hi", "<p>Hi</p>") is True
            mock_client.assert_not_called()

    def test_successful_send(self, monkeypatch):
        monkeypatch.setattr(email_service, "ENABLE_EMAIL", True)
        monkeypatch.setattr(email_service, "SENDGRID_API_KEY", "SG.test")
        with patch("crickheroes.services.email_service.SendGridAPIClient") as mock_client:
            mock_client.return_value.send.return_value = MagicMock(status_code=202)
            assert email_service.send_email("alex@example.com", "Hi", "<p>Hi</p>") is True
            mock_client.assert_called_once_with("SG.test")

    def test_error_status_reports_failure(self, monkeypatch):
        monkeypatch.setattr(email_service, "ENABLE_EMAIL", True)
        monkeypatch.setattr(email_service, "SENDGRID_API_KEY", "SG.test")
        with patch("crickheroes.services.email_service.SendGridAPIClient") as mock_client:
            mock_client.return_value.send.return_value = MagicMock(status_code=401, body="denied")
            assert email_service.send_email("alex@example.com", "Hi", "<p>Hi</p>") is False

    def test_exception_reports_failure(self, monkeypatch):
        monkeypatch.setattr(email_service, "ENABLE_EMAIL", True)
        monkeypatch.setattr(email_service, "SENDGRID_API_KEY", "SG.test")
        with patch("crickheroes.services.email_service.SendGridAPIClient") as mock_client:
            mock_client.return_value.send.side_effect = Exception("network down")
            assert email_service.send_email("alex@example.com", "Hi", "<p>Hi</p>") is False


class TestResetCodeEmail:
    def test_body_contains_code_and_expiry(self):
        html = email_service.render_reset_code_email("123456")
        assert "123456" in html
        assert "10 minutes" in html

    def test_send_reset_code_uses_subject(self):
        with patch("crickheroes.services.email_service.send_email", return_value=True) as mock_send:
            assert email_service.send_reset_code("alex@example.com", "123456") is True
            to, subject, html = mock_send.call_args[0]
            assert to == "alex@example.com"
            assert subject == "Your CrickHeroes Password Reset Code"
            assert "123456" in html


def test_get_bool_env(monkeypatch):
    monkeypatch.setenv("SOME_FLAG", "Yes")
    assert email_service.get_bool_env("SOME_FLAG", default=False) is True
    monkeypatch.setenv("SOME_FLAG", "off")
    assert email_service.get_bool_env("SOME_FLAG", default=True) is False
    monkeypatch.delenv("SOME_FLAG")
    assert email_service.get_bool_env("SOME_FLAG", default=True) is True
