"""SOAP-over-HTTP transport implemented with httpx"""

import logging
import xml.etree.ElementTree as ET
from typing import Any, Dict, List, Optional

import httpx

from .base import CallResult, Parameters, Transport
from ..api.exceptions import TransportError
from ..constants import DEFAULT_HTTP_TIMEOUT, SOAP_ENVELOPE_NAMESPACE, XSI_NAMESPACE

logger = logging.getLogger(__name__)

_ENV = f"{{{SOAP_ENVELOPE_NAMESPACE}}}"
_XSI_NIL = f"{{{XSI_NAMESPACE}}}nil"


def _local_name(tag: str) -> str:
    return tag.rsplit('}', 1)[-1]


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_element(parent: ET.Element, namespace: str, name: str, value: Any) -> None:
    """Append ``value`` under ``parent`` as one or more ``name`` elements

    Lists become repeated elements, dicts become nested elements and
    everything else becomes text.
    """
    if isinstance(value, (list, tuple)):
        for item in value:
            build_element(parent, namespace, name, item)
        return

    element = ET.SubElement(parent, f"{{{namespace}}}{name}")
    if value is None:
        element.set(_XSI_NIL, "true")
    elif isinstance(value, dict):
        for key, child in value.items():
            build_element(element, namespace, key, child)
    else:
        element.text = _format_value(value)


def parse_element(element: ET.Element) -> Any:
    """Convert a response element into plain Python values

    Leaf elements become strings (or None when nil); repeated child
    names are collected into lists.
    """
    children = list(element)
    if not children:
        if element.get(_XSI_NIL) == "true":
            return None
        return element.text if element.text is not None else ""

    result: Dict[str, Any] = {}
    for child in children:
        key = _local_name(child.tag)
        value = parse_element(child)
        if key in result:
            if not isinstance(result[key], list):
                result[key] = [result[key]]
            result[key].append(value)
        else:
            result[key] = value

    # sObjects carry their type as an attribute
    xsi_type = element.get(f"{{{XSI_NAMESPACE}}}type")
    if xsi_type and "type" not in result:
        result["type"] = _local_name(xsi_type.split(":")[-1])

    return result


class SoapTransport(Transport):
    """Sends SOAP 1.1 requests with httpx"""

    def __init__(self, config: Dict[str, Any] = None, client: Optional[httpx.Client] = None):
        """
        Initialize SOAP transport

        Args:
            config: Transport configuration including:
                - timeout: Request timeout in seconds
                - verify: Verify TLS certificates
            client: Pre-built httpx client (mainly for testing)
        """
        super().__init__(config)
        self._owns_client = client is None
        self.client = client or httpx.Client(
            timeout=self.config.get('timeout', DEFAULT_HTTP_TIMEOUT),
            verify=self.config.get('verify', True),
        )

    def build_envelope(self,
                       namespace: str,
                       operation: str,
                       headers: Optional[Dict[str, Dict[str, Any]]],
                       parameters: Parameters) -> bytes:
        """Serialize a request envelope"""
        envelope = ET.Element(f"{_ENV}Envelope")

        if headers:
            header_el = ET.SubElement(envelope, f"{_ENV}Header")
            for name, value in headers.items():
                build_element(header_el, namespace, name, value)

        body = ET.SubElement(envelope, f"{_ENV}Body")
        operation_el = ET.SubElement(body, f"{{{namespace}}}{operation}")
        for name, value in parameters:
            build_element(operation_el, namespace, name, value)

        return ET.tostring(envelope, encoding='utf-8', xml_declaration=True)

    def parse_envelope(self, content: bytes) -> CallResult:
        """Decode a response envelope into a CallResult

        Raises:
            TransportError: If the response is not a SOAP envelope
        """
        try:
            root = ET.fromstring(content)
        except ET.ParseError as e:
            raise TransportError(f"Response is not valid XML: {e}")

        body = root.find(f"{_ENV}Body")
        if body is None:
            raise TransportError("Response has no SOAP body")

        fault = body.find(f"{_ENV}Fault")
        if fault is not None:
            return CallResult.fault(
                fault_string=(fault.findtext("faultstring") or "").strip(),
                fault_code=(fault.findtext("faultcode") or "").strip() or None,
            )

        headers: Dict[str, Any] = {}
        header_el = root.find(f"{_ENV}Header")
        if header_el is not None:
            for child in header_el:
                headers[_local_name(child.tag)] = parse_element(child)

        response = next(iter(body), None)
        if response is None:
            return CallResult.ok(None, headers)

        results: List[Any] = [
            parse_element(child) for child in response
            if _local_name(child.tag) == "result"
        ]
        if not results:
            result = None
        elif len(results) == 1:
            result = results[0]
        else:
            result = results

        return CallResult.ok(result, headers)

    def call(self,
             endpoint_url: str,
             namespace: str,
             operation: str,
             headers: Optional[Dict[str, Dict[str, Any]]] = None,
             parameters: Parameters = ()) -> CallResult:
        """Send a SOAP request and decode the response"""
        payload = self.build_envelope(namespace, operation, headers, parameters)
        logger.debug("POST %s %s (%d bytes)", endpoint_url, operation, len(payload))

        try:
            response = self.client.post(
                endpoint_url,
                content=payload,
                headers={
                    "Content-Type": "text/xml; charset=utf-8",
                    "SOAPAction": '""',
                },
            )
        except httpx.HTTPError as e:
            raise TransportError(f"{operation} request to {endpoint_url} failed: {e}")

        # Faults arrive with HTTP 500, so the body is parsed regardless
        result = self.parse_envelope(response.content)
        if result.is_fault:
            logger.debug("%s fault: %s", operation, result.fault_string)
        elif response.status_code >= 400:
            raise TransportError(f"{operation} returned HTTP {response.status_code}")

        return result

    def close(self) -> None:
        """Close the underlying httpx client"""
        if self._owns_client:
            self.client.close()
