from pubip.errors import (
    EndpointUnreachableError,
    FetchError,
    InvalidAddressError,
    NotEnoughResultsError,
    PubIPError,
    ResolveError,
    ResultsDisagreeError,
    UnexpectedStatusError,
)
from pubip.fetcher import fetch_ip
from pubip.resolver import Resolver, resolve

__version__ = "0.1.0"
