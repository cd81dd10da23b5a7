from __future__ import annotations

import logging
import re
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from companion.backend import constants


logger = logging.getLogger(__name__)

_USER_ID_RE = re.compile(r"^[A-Za-z0-9_.:-]{1,64}$")


def _user_id(request: Request) -> str:
	raw = request.headers.get("X-User-ID", "").strip()
	if raw and _USER_ID_RE.match(raw):
		return raw
	return constants.DEFAULT_USER_ID


class RequestContextMiddleware(BaseHTTPMiddleware):
	async def dispatch(self, request: Request, call_next) -> Response:
		request_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
		request.state.request_id = request_id
		request.state.user_id = _user_id(request)
		start = time.perf_counter()
		response = await call_next(request)
		process_time = time.perf_counter() - start
		response.headers["X-Request-ID"] = request_id
		response.headers["X-Process-Time"] = f"{process_time:.6f}"
		logger.info(
			"%s %s -> %s in %.3fs [request_id=%s]",
			request.method,
			request.url.path,
			response.status_code,
			process_time,
			request_id,
		)
		return response
