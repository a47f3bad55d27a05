"""Gemini Provider 适配器。

本模块负责：

1. 接收统一的 GenerateContentRequest。
2. 将其转换为 generateContent 的 JSON 请求体（camelCase 字段）。
3. 调用 HTTP 接口并处理网络/API 异常。
4. 将响应 JSON 解析为 GenerateContentResponse。

- URL: {base_url}/models/{model}:generateContent?key=<api_key>（由调用方构造）
- 认证: API key 位于查询参数中，因此日志里的 URL 一律脱敏。
"""

from typing import Any, Dict, List, Optional

import httpx

from gemini_core.domain.exceptions import ApiError, NetworkError, RateLimitError, ResponseDecodeError
from gemini_core.domain.models import (
    Candidate,
    Content,
    GenerateContentRequest,
    GenerateContentResponse,
    Part,
)
from gemini_core.infrastructure.logging.logger import logger, mask_key

DEFAULT_TIMEOUT = 30.0


class GeminiClient:
    """Gemini generateContent 客户端实现。"""

    name = "gemini"

    def __init__(self, timeout: Optional[float] = None):
        self._timeout = timeout or DEFAULT_TIMEOUT

    def generate_content(self, endpoint: str, req: GenerateContentRequest) -> GenerateContentResponse:
        """执行一次非流式 generateContent 调用。

        步骤：
        1. 构造 HTTP 请求 payload。
        2. 发送请求并捕获网络错误/限流/服务端错误。
        3. 解码 JSON 并构造 GenerateContentResponse。
        """

        payload = self._build_payload(req)
        logger.info(
            "gemini_client.request",
            extra={"extra": {"endpoint": mask_key(endpoint), "contents": len(req.contents)}},
        )
        try:
            with httpx.Client(timeout=self._timeout, trust_env=False) as client:
                resp = client.post(
                    endpoint,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
        except httpx.RequestError as e:
            # 网络错误：DNS 失败、连接超时等；异常文本可能带 URL，先脱敏
            logger.warning("gemini_client.error", extra={"extra": {"kind": "network"}})
            raise NetworkError(code="NETWORK_ERROR", message=mask_key(str(e)))
        if resp.status_code == 429:
            logger.warning("gemini_client.error", extra={"extra": {"kind": "rate_limit", "http_status": 429}})
            raise RateLimitError(code="RATE_LIMIT", message="Gemini rate limit", http_status=429)
        if resp.status_code >= 400:
            logger.warning(
                "gemini_client.error",
                extra={"extra": {"kind": "api", "http_status": resp.status_code}},
            )
            raise ApiError(code="API_ERROR", message=resp.text, http_status=resp.status_code)
        try:
            data = resp.json()
        except ValueError as e:
            raise ResponseDecodeError(code="DECODE_ERROR", message=f"response is not JSON: {e}")
        return self._parse_response(data)

    # ---- 辅助方法 ----

    def _build_payload(self, req: GenerateContentRequest) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": req.model,
            "contents": [self._content_to_payload(c) for c in req.contents],
        }
        if req.system_instruction is not None:
            payload["systemInstruction"] = self._content_to_payload(req.system_instruction)
        for key, value in req.extra.items():
            payload.setdefault(key, value)
        return payload

    def _content_to_payload(self, content: Content) -> Dict[str, Any]:
        parts: List[Dict[str, Any]] = []
        for part in content.parts:
            item: Dict[str, Any] = dict(part.extra)
            if part.text is not None:
                item["text"] = part.text
            parts.append(item)
        return {"parts": parts, "role": content.role}

    def _parse_response(self, data: Any) -> GenerateContentResponse:
        if not isinstance(data, dict):
            raise ResponseDecodeError(code="DECODE_ERROR", message="response body is not a JSON object")
        raw_candidates = data.get("candidates")
        if raw_candidates is None:
            raw_candidates = []
        if not isinstance(raw_candidates, list):
            raise ResponseDecodeError(code="DECODE_ERROR", message="candidates is not a list")
        candidates: List[Candidate] = []
        for ch in raw_candidates:
            if not isinstance(ch, dict):
                raise ResponseDecodeError(code="DECODE_ERROR", message="candidate is not an object")
            extra = {k: v for k, v in ch.items() if k != "content"}
            content = ch.get("content")
            candidates.append(Candidate(content=self._parse_content({} if content is None else content), extra=extra))
        model_version = data.get("modelVersion")
        if model_version is None:
            model_version = ""
        if not isinstance(model_version, str):
            raise ResponseDecodeError(code="DECODE_ERROR", message="modelVersion is not a string")
        extra = {k: v for k, v in data.items() if k not in ("candidates", "modelVersion")}
        return GenerateContentResponse(
            candidates=candidates,
            model_version=model_version,
            extra=extra,
            raw=data,
        )

    def _parse_content(self, payload: Any) -> Content:
        if not isinstance(payload, dict):
            raise ResponseDecodeError(code="DECODE_ERROR", message="candidate content is not an object")
        raw_parts = payload.get("parts")
        if raw_parts is None:
            raw_parts = []
        if not isinstance(raw_parts, list):
            raise ResponseDecodeError(code="DECODE_ERROR", message="content parts is not a list")
        parts: List[Part] = []
        for p in raw_parts:
            if not isinstance(p, dict):
                raise ResponseDecodeError(code="DECODE_ERROR", message="part is not an object")
            text = p.get("text")
            if text is not None and not isinstance(text, str):
                raise ResponseDecodeError(code="DECODE_ERROR", message="part text is not a string")
            parts.append(Part(text=text, extra={k: v for k, v in p.items() if k != "text"}))
        return Content(parts=parts, role=payload.get("role") or "model")
