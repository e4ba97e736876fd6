"""
OpenAPI Exporter - Renders extracted endpoints as an OpenAPI 3.0 document.
"""

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from autodoc.extractors.annotations import ParameterLocation
from autodoc.extractors.controller_extractor import ControllerDescriptor, EndpointDescriptor

logger = logging.getLogger(__name__)

OPENAPI_VERSION = "3.0.0"
JSON_CONTENT_TYPE = "application/json"

_PATH_PARAM_RE = re.compile(r":([A-Za-z_$][\w$]*)")


def to_openapi_path(full_path: str) -> str:
    """/users/:id -> /users/{id}"""
    return _PATH_PARAM_RE.sub(r"{\1}", full_path)


class OpenApiExporter:
    """Builds OpenAPI documents from controller descriptors"""

    def __init__(
        self,
        title: str = "API Documentation",
        version: str = "1.0.0",
        server_url: Optional[str] = None,
    ):
        self.title = title
        self.version = version
        self.server_url = server_url

    def build(
        self,
        controllers: List[ControllerDescriptor],
        type_schemas: Optional[Dict[str, Dict[str, Any]]] = None,
    ) -> Dict[str, Any]:
        """
        Build the OpenAPI document

        Args:
            controllers: Extracted controllers
            type_schemas: Type catalog; its schemas become components

        Returns:
            OpenAPI document as a dictionary
        """
        document: Dict[str, Any] = {
            "openapi": OPENAPI_VERSION,
            "info": {
                "title": self.title,
                "version": self.version,
                "description": "Auto-generated API documentation",
            },
            "paths": {},
            "components": {
                "schemas": {
                    name: entry["schema"]
                    for name, entry in (type_schemas or {}).items()
                },
            },
        }
        if self.server_url:
            document["servers"] = [{"url": self.server_url}]

        for controller in controllers:
            for endpoint in controller.endpoints:
                path_item = document["paths"].setdefault(to_openapi_path(endpoint.full_path), {})
                path_item[endpoint.verb.value.lower()] = self._operation(endpoint)

        logger.debug(f"Built OpenAPI document with {len(document['paths'])} paths")
        return document

    def export(
        self,
        controllers: List[ControllerDescriptor],
        output_file: Union[str, Path],
        type_schemas: Optional[Dict[str, Dict[str, Any]]] = None,
    ) -> Path:
        """Write the OpenAPI document as JSON"""
        output_file = Path(output_file)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        with open(output_file, "w", encoding="utf-8") as f:
            json.dump(self.build(controllers, type_schemas), f, indent=2, default=str)
        logger.info(f"Exported OpenAPI document to {output_file}")
        return output_file

    def _operation(self, endpoint: EndpointDescriptor) -> Dict[str, Any]:
        operation: Dict[str, Any] = {
            "summary": endpoint.summary,
            "operationId": endpoint.handler,
            "tags": endpoint.tags,
            "parameters": [
                {
                    "name": param.name,
                    "in": param.location.value,
                    # Path parameters are always required in OpenAPI
                    "required": param.required or param.location == ParameterLocation.PATH,
                    "schema": param.schema,
                }
                for param in endpoint.parameters
                if param.location != ParameterLocation.BODY
            ],
            "responses": self._responses(endpoint),
        }
        if endpoint.description:
            operation["description"] = endpoint.description

        if endpoint.request_schema is not None:
            body: Dict[str, Any] = {"schema": endpoint.request_schema}
            request_examples = [e["request"] for e in endpoint.examples if "request" in e]
            if request_examples:
                body["example"] = request_examples[0]
            operation["requestBody"] = {
                "required": True,
                "content": {JSON_CONTENT_TYPE: body},
            }

        return operation

    def _responses(self, endpoint: EndpointDescriptor) -> Dict[str, Any]:
        responses: Dict[str, Any] = {}
        for status in endpoint.status_codes:
            response: Dict[str, Any] = {"description": status.description}
            if endpoint.response_schema is not None and 200 <= status.code < 300:
                content: Dict[str, Any] = {"schema": endpoint.response_schema}
                examples = {
                    f"example-{status.code}": {"value": e["response"]}
                    for e in endpoint.examples
                    if "response" in e
                }
                if examples:
                    content["examples"] = examples
                response["content"] = {JSON_CONTENT_TYPE: content}
            responses[str(status.code)] = response
        return responses
