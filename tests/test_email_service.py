"""
Tests for email service
"""
from unittest.mock import MagicMock, patch

from services.email_service import get_notification_recipients, send_notification_email


class TestEmailService:
    """Test email service"""

    @patch('services.email_service.EmailMessage')
    @patch('services.email_service.settings')
    def test_send_notification_email(self, mock_settings, mock_email_message):
        """Test sending a sales team notification"""
        mock_settings.SALES_TEAM_EMAIL = 'sales@example.com'
        mock_settings.DEFAULT_FROM_EMAIL = 'from@example.com'

        mock_email = MagicMock()
        mock_email.send.return_value = None
        mock_email.extra_headers = {}
        mock_email_message.return_value = mock_email

        message_id = send_notification_email('New order', 'Order body')

        assert message_id is not None
        assert '@crm.local' in message_id
        mock_email.send.assert_called_once()
        assert mock_email.extra_headers['Message-ID'] == f'<{message_id}>'
        assert mock_email_message.call_args[1]['to'] == ['sales@example.com']

    @patch('services.email_service.EmailMessage')
    @patch('services.email_service.settings')
    def test_disabled_without_recipients(self, mock_settings, mock_email_message):
        mock_settings.SALES_TEAM_EMAIL = ''

        assert send_notification_email('New lead', 'body') is None
        mock_email_message.assert_not_called()

    @patch('services.email_service.EmailMessage')
    @patch('services.email_service.settings')
    def test_send_failure_is_logged_not_raised(self, mock_settings, mock_email_message):
        mock_settings.SALES_TEAM_EMAIL = 'sales@example.com'
        mock_settings.DEFAULT_FROM_EMAIL = 'from@example.com'
        mock_email = MagicMock()
        mock_email.extra_headers = {}
        mock_email.send.side_effect = ConnectionRefusedError('smtp down')
        mock_email_message.return_value = mock_email

        assert send_notification_email('New lead', 'body') is None

    @patch('services.email_service.settings')
    def test_recipients_are_comma_separated(self, mock_settings):
        mock_settings.SALES_TEAM_EMAIL = ' a@example.com, ,b@example.com '

        assert get_notification_recipients() == ['a@example.com', 'b@example.com']
