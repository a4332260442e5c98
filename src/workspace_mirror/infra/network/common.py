from __future__ import annotations

USER_AGENT = "WorkspaceMirror-Client/1.0.0"
DEFAULT_TIMEOUT = 30

# Analysis backend answers 406 for file types it does not handle
HTTP_NOT_ACCEPTABLE = 406
