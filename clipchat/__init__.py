# =============================================================================
# Clipboard VLM Chat - Client Package
# =============================================================================
# This package contains the clipboard reader, PNG/base64 image encoder,
# prompt builder, llama.cpp completion client and the chat session driver.
# Only the clipboard image and the transcript leave the machine, and only to
# the configured local server.
# =============================================================================
