"""
Process-wide domain objects registered in the external container.
"""

import time
import uuid


class RootObject:
    """Shared object owned by the external container, one per process"""

    def __init__(self):
        self.id = uuid.uuid4().hex
        self.created_at = time.time()

    def __repr__(self) -> str:
        return f"<RootObject {self.id}>"
