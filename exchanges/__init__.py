"""
Exchange Connectors Package

Each exchange has its own subfolder with an api_client.py that turns
exchange-specific endpoints into paths for the shared UpstreamFetcher.
"""
