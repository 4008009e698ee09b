"""
conductor
- Redeploys docker compose workloads on an authenticated HTTP trigger or on a timer.
- Periodically prunes unused images.
"""

__version__ = "0.1.0"
