"""Core - configuracao, logging, erros, auth, rate limiting e cache."""
