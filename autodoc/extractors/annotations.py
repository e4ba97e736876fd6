"""Classification of entry-point annotations: HTTP verbs, parameter locations, status codes."""
from enum import Enum
from typing import Dict, List, Optional, Tuple


class HttpVerb(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"
    HEAD = "HEAD"
    ALL = "ALL"


class ParameterLocation(str, Enum):
    BODY = "body"
    PATH = "path"
    QUERY = "query"
    HEADER = "header"


CONTROLLER_ANNOTATION = "Controller"
SERVICE_ANNOTATION = "Injectable"
MODULE_ANNOTATION = "Module"

VERB_ANNOTATIONS: Dict[str, HttpVerb] = {
    "Get": HttpVerb.GET,
    "Post": HttpVerb.POST,
    "Put": HttpVerb.PUT,
    "Patch": HttpVerb.PATCH,
    "Delete": HttpVerb.DELETE,
    "Options": HttpVerb.OPTIONS,
    "Head": HttpVerb.HEAD,
    "All": HttpVerb.ALL,
}

LOCATION_ANNOTATIONS: Dict[str, ParameterLocation] = {
    "Body": ParameterLocation.BODY,
    "Param": ParameterLocation.PATH,
    "Query": ParameterLocation.QUERY,
    "Headers": ParameterLocation.HEADER,
}

# Unmatched parameter annotations fall back to this location
DEFAULT_LOCATION = ParameterLocation.BODY

# Parameters the framework injects; they are not part of the documented contract
INJECTED_ANNOTATIONS = frozenset(["Req", "Res", "Next", "Request", "Response"])

STATUS_CODES: Dict[HttpVerb, List[Tuple[int, str]]] = {
    HttpVerb.GET: [(200, "Success"), (404, "Not found")],
    HttpVerb.PUT: [(200, "Success"), (404, "Not found")],
    HttpVerb.PATCH: [(200, "Success"), (404, "Not found")],
    HttpVerb.DELETE: [(200, "Success"), (404, "Not found")],
    HttpVerb.POST: [(201, "Created"), (400, "Bad request")],
}

DEFAULT_STATUS_CODES: List[Tuple[int, str]] = [(200, "Success")]


def verb_for(annotation_name: str) -> Optional[HttpVerb]:
    """Return the HTTP verb of a method annotation, or None if it is not a route."""
    return VERB_ANNOTATIONS.get(annotation_name)


def location_for(annotation_name: Optional[str]) -> ParameterLocation:
    """Return the location of a parameter annotation (body when unmatched)."""
    if annotation_name is None:
        return DEFAULT_LOCATION
    return LOCATION_ANNOTATIONS.get(annotation_name, DEFAULT_LOCATION)


def status_codes_for(verb: Optional[HttpVerb]) -> List[Tuple[int, str]]:
    """Return (code, description) pairs documented for a verb."""
    return list(STATUS_CODES.get(verb, DEFAULT_STATUS_CODES))


def build_path(base_path: Optional[str], method_path: Optional[str]) -> str:
    """
    Join a controller base path and a method path into one route template

    Examples:
        build_path("users", ":id")  -> "/users/:id"
        build_path("/api/", "/")    -> "/api"
        build_path(None, None)      -> "/"
    """
    segments = []
    for part in (base_path, method_path):
        if not part:
            continue
        segments.extend(s for s in part.split("/") if s)
    return "/" + "/".join(segments)
