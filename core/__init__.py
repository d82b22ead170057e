"""
Core Package

Exchange-agnostic proxy logic:
- UpstreamFetcher: outbound GET with timeout and host failover
- ResponseShaper: allow-list filters and candle mapping
- OriginPolicy: cross-origin allow-list
- Schemas and errors shared by all layers
"""
