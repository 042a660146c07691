"""HTTP adapters - Auth backend clients."""

from .gateway import HttpAccountGateway, HttpOtpGateway

__all__ = ["HttpAccountGateway", "HttpOtpGateway"]
