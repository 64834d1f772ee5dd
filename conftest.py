# =============================================================================
# CONFTEST - Configuracao global do pytest
# =============================================================================
# Define o ambiente antes de qualquer import do servidor
# =============================================================================

import os
import sys
from pathlib import Path

# Adicionar root ao path
sys.path.insert(0, str(Path(__file__).parent))

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "ERROR")
os.environ.setdefault("LOG_FORMAT", "text")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
