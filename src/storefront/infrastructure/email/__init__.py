from storefront.infrastructure.email.mailing_service import MailingService

__all__ = ["MailingService"]
