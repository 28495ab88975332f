"""
Submission service application package.

- ratelimit: rolling-window admission gate
- documents: envelope model, per-format encoders, format registry
- adapters: registry HTTP client and token providers
- orchestrator: the gate, encode, send pipeline
- main: FastAPI surface
"""
