# =============================================================================
# Clipboard VLM Chat - Shared Schemas Package
# =============================================================================
# Data contracts for the llama.cpp server's /completion endpoint.
# =============================================================================
