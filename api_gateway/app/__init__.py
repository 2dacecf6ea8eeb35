"""
API Gateway
===========

Authenticated HTTP proxy in front of the data service.

Every proxied route reuses the same forwarder (proxy.forwarder) and the same
error resolver (proxy.resolver); guards (auth.guards) run before forwarding.
"""
