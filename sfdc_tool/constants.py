"""Global constants for sfdc-tool"""

from enum import Enum
import re

APP_NAME = "sfdc-tool"
LOG_FORMAT = "%(message)s"

# Project identification
PROJECT_CONFIG_FILE = ".sfdc-tool.yaml"
DEFAULT_SRC_DIR = "src"

# API versions
DEFAULT_API_VERSION = "33.0"
MIN_API_VERSION = "31.0"
DEFAULT_LOGIN_URL = "https://test.salesforce.com"
LOGIN_PATH = "/services/Soap/u/{api_version}"

# SOAP namespaces
PARTNER_NAMESPACE = "urn:partner.soap.sforce.com"
METADATA_NAMESPACE = "http://soap.sforce.com/2006/04/metadata"
APEX_NAMESPACE = "http://soap.sforce.com/2006/08/apex"
TOOLING_NAMESPACE = "urn:tooling.soap.sforce.com"
SOAP_ENVELOPE_NAMESPACE = "http://schemas.xmlsoap.org/soap/envelope/"
XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"

# Manifest file format
MANIFEST_XML_DECLARATION = "<?xml version='1.0' encoding='UTF-8'?>"
META_FILE_SUFFIX = "-meta.xml"
ARCHIVE_ROOT = "unpackaged"

# Session renewal
DEFAULT_SESSION_FAULT_CODES = ["INVALID_SESSION_ID"]

# Polling
DEFAULT_POLL_INTERVAL = 15  # seconds
DEFAULT_QUERY_POLL_INTERVAL = 0  # seconds between queryMore pages
DEFAULT_HTTP_TIMEOUT = 120.0  # seconds

# Vendor limits
CRUD_CHUNK_SIZE = 200
LIST_METADATA_CHUNK_SIZE = 3

# Zip settings
ZIP_COMPRESSION_LEVEL = 9


class JobKind(Enum):
    RETRIEVE = "Retrieve"
    DEPLOY = "Deploy"


# Status vocabularies reported by checkRetrieveStatus / checkDeployStatus
RETRIEVE_IN_PROGRESS_STATUSES = frozenset({"Pending", "InProgress"})
RETRIEVE_SUCCESS_STATUS = "Succeeded"
DEPLOY_IN_PROGRESS_STATUSES = frozenset({"Queued", "Pending", "InProgress"})
DEPLOY_SUCCESS_STATUS = "Succeeded"


# Error codes
class ErrorCode:
    CONFIG_FORMAT_ERROR = "SF001"
    MALFORMED_PATH = "SF002"
    MISSING_NAME = "SF003"
    UNKNOWN_ARTIFACT_TYPE = "SF004"
    MANIFEST_INVALID = "SF005"
    OPERATION_FAULT = "SF006"
    SESSION_RETRY_EXHAUSTED = "SF007"
    LOGIN_FAILED = "SF008"
    UNEXPECTED_STATUS = "SF009"
    POLL_TIMEOUT = "SF010"
    OPERATION_CANCELLED = "SF011"
    APEX_EXECUTION_FAILED = "SF012"
    ARCHIVE_ERROR = "SF013"
    TRANSPORT_ERROR = "SF014"


# Environment variables
ENV_CONFIG_PATH = "SFDC_TOOL_CONFIG"
ENV_USERNAME = "SFDC_USERNAME"
ENV_PASSWORD = "SFDC_PASSWORD"
ENV_URL = "SFDC_URL"
ENV_API_VERSION = "SFDC_API_VERSION"
ENV_POLL_INTERVAL = "SFDC_POLL_INTERVAL"

# Validation patterns
TYPE_SEGMENT_PATTERN = re.compile(r"^(\w+)/")
FOLDER_SEGMENT_PATTERN = re.compile(r"/(\w+)/")
BARE_META_PATTERN = re.compile(r"/(\w+)-meta\.xml")
FREEFORM_NAME_PATTERN = re.compile(r"/([^/]*?)(-meta\.xml)?$")

# Display constants
EMOJI_SUCCESS = "✓"
EMOJI_ERROR = "✗"

# Messages templates
MSG_MANIFEST_WRITTEN = f"{EMOJI_SUCCESS} Manifest written: {{path}} ({{count}} member(s))"
