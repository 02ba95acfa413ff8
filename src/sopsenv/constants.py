# Selects the decryption backend: "sops" (default) or "plaintext".
ENV_SOPSENV_DECRYPTOR = "SOPSENV_DECRYPTOR"

# Path or name of the sops executable.
ENV_SOPSENV_SOPS_BINARY = "SOPSENV_SOPS_BINARY"

# Optional upper bound, in seconds, on a single decryption.
ENV_SOPSENV_DECRYPT_TIMEOUT = "SOPSENV_DECRYPT_TIMEOUT"

# Minimum level of log records written to stderr.
ENV_SOPSENV_LOG_LEVEL = "SOPSENV_LOG_LEVEL"

DEFAULT_SOPS_BINARY = "sops"
DEFAULT_LOG_LEVEL = "INFO"

# Replacement character for the hidden part of a sensitive value.
MASK_CHAR = "*"
