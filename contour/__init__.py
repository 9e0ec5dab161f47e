"""Resource types, xDS caches, endpoint translation and event filtering for an Envoy ingress controller."""

__version__ = "0.1.0"