from __future__ import annotations

from typing import Callable

import httpx
import pytest

from etagere.core.config import Settings

SRU_EMPTY = """<?xml version="1.0" encoding="UTF-8"?>
<srw:searchRetrieveResponse xmlns:srw="http://www.loc.gov/zing/srw/">
  <srw:version>1.2</srw:version>
  <srw:numberOfRecords>0</srw:numberOfRecords>
  <srw:records/>
</srw:searchRetrieveResponse>
"""

SRU_RECORD = """<?xml version="1.0" encoding="UTF-8"?>
<srw:searchRetrieveResponse xmlns:srw="http://www.loc.gov/zing/srw/">
  <srw:version>1.2</srw:version>
  <srw:numberOfRecords>1</srw:numberOfRecords>
  <srw:records>
    <srw:record>
      <srw:recordSchema>dublincore</srw:recordSchema>
      <srw:recordPacking>xml</srw:recordPacking>
      <srw:recordData>
        <oai_dc:dc xmlns:oai_dc="http://www.openarchives.org/OAI/2.0/oai_dc/"
                   xmlns:dc="http://purl.org/dc/elements/1.1/">
          <dc:identifier>https://catalogue.bnf.fr/ark:/12148/cb35000000x</dc:identifier>
          <dc:identifier>ISBN 978-2-07-061275-8</dc:identifier>
          <dc:title>Le petit prince /
            Antoine de Saint-Exupéry</dc:title>
          <dc:creator>Saint-Exupéry, Antoine de (1900-1944). Auteur du texte</dc:creator>
          <dc:creator>Durand, Jean. Traducteur</dc:creator>
          <dc:publisher>Gallimard (Paris)</dc:publisher>
          <dc:date>2007</dc:date>
          <dc:description>Première partie.</dc:description>
          <dc:description>Seconde partie.</dc:description>
          <dc:language>fre</dc:language>
          <dc:language>français</dc:language>
          <dc:type>texte imprimé</dc:type>
        </oai_dc:dc>
      </srw:recordData>
      <srw:recordPosition>1</srw:recordPosition>
    </srw:record>
  </srw:records>
</srw:searchRetrieveResponse>
"""

SRU_NO_TITLE = SRU_RECORD.replace(
    """<dc:title>Le petit prince /
            Antoine de Saint-Exupéry</dc:title>""",
    "",
)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        target_language="fr",
        bnf_timeout_ms=200,
        google_timeout_ms=200,
        openlibrary_timeout_ms=200,
        translate_timeout_ms=200,
        translate_enabled=False,
    )


@pytest.fixture
def make_client() -> Callable[..., httpx.AsyncClient]:
    """Build an AsyncClient whose requests are answered by ``handler``."""

    def _make(handler: Callable[[httpx.Request], object]) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _make
