"""Cross-cutting helpers: logging, metrics, digests and shared models."""
