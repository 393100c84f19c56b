"""
Tests for the Parking Facility Engine

unit/        - components in isolation (domain, infrastructure, DTOs, config)
integration/ - the facility end to end, concurrency, service layer and CLI
"""

import sys
from pathlib import Path

# Add the src directory to the Python path
src_root = Path(__file__).parent.parent / "src"
if str(src_root) not in sys.path:
    sys.path.insert(0, str(src_root))
