"""Facet vocabulary endpoint (/api/lookups)."""

from __future__ import annotations

import logging

from pyconflict._api._common import parse_model
from pyconflict._constants import LOOKUPS_ENDPOINT
from pyconflict._transport import Transport
from pyconflict.models.lookups import LookupVocabulary

_logger = logging.getLogger(__name__)


async def fetch_lookups(transport: Transport) -> LookupVocabulary:
    payload = await transport.get_json(LOOKUPS_ENDPOINT)
    vocabulary = parse_model(LookupVocabulary, payload, LOOKUPS_ENDPOINT)
    _logger.debug(
        "Lookups: countries=%d regions=%d sides_a=%d sides_b=%d violence_types=%d",
        len(vocabulary.countries),
        len(vocabulary.regions),
        len(vocabulary.sides_a),
        len(vocabulary.sides_b),
        len(vocabulary.violence_types),
    )
    return vocabulary
