"""FFI Calculator backend: reliability formulas, FFI variants and the RCM Decision Tool over FastAPI."""
