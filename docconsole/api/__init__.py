"""
Console API: wire models and the async HTTP client.
"""
