from storefront.application.context.session_context import SessionContext

__all__ = ["SessionContext"]
