from quandl_client.client import QuandlClient

__all__ = ["QuandlClient"]
