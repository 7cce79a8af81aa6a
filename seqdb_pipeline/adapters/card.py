#!/usr/bin/env python3

"""
CARD, the Comprehensive Antibiotic Resistance Database.

CARD ships ``card.json``: a mapping of model ID to model. Only protein
homolog models are gene presence models, so only those are kept.
"""

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List

from ..core.acquisition import SourceFetcher
from ..core.data_structures import Record, SequenceType
from .base import SourceAdapter, register_adapter


PROTEIN_HOMOLOG_MODEL = "protein homolog model"


@register_adapter
class CardAdapter(SourceAdapter):
    name = "card"
    description = "Comprehensive Antibiotic Resistance Database protein homolog models"
    url = "https://card.mcmaster.ca/latest/data"

    def acquire(self, fetcher: SourceFetcher, workdir: Path) -> Path:
        archive = fetcher.download(self.url, workdir / "card-data.tar.bz2")
        extracted = fetcher.extract_tar(archive, workdir / "card-data")
        return extracted / "card.json"

    def load(self, source: Path) -> List[Record]:
        if not source.exists():
            raise self.error(f"JSON file not found: {source}")

        logging.info(f"Parsing {source}")
        try:
            with open(source, 'r') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise self.error(f"Invalid JSON in {source}: {e}")
        return self.parse_models(data)

    def parse_models(self, data: Dict[str, Any]) -> List[Record]:
        """Convert decoded card.json content to Records."""
        records = []
        for key in sorted(data):
            model = data[key]
            # Skip _version, _comment, _timestamp and similar metadata
            if not isinstance(model, dict):
                continue
            if model.get('model_type') != PROTEIN_HOMOLOG_MODEL:
                continue
            records.append(self._model_to_record(key, model))

        logging.info(f"Found {len(records)} {PROTEIN_HOMOLOG_MODEL}s")
        return records

    def _model_to_record(self, key: str, model: Dict[str, Any]) -> Record:
        model_name = model.get('model_name', '')
        record_id = re.sub(r"\s+", "_", model_name.strip())
        if not record_id:
            raise self.error("model has no model_name", key)

        if 'snp' in (model.get('model_param') or {}):
            raise self.error("SNP models are not supported", record_id)

        sequences = (model.get('model_sequences') or {}).get('sequence')
        if not sequences:
            raise self.error("model has no sequence", record_id)

        first = sequences[sorted(sequences)[0]]
        dna = first.get('dna_sequence') or {}
        if not dna.get('sequence'):
            raise self.error("model has no DNA sequence", record_id)

        try:
            start = int(dna['fmin']) + 1
            end = int(dna['fmax']) + 1
        except (KeyError, TypeError, ValueError):
            raise self.error("DNA sequence lacks fmin/fmax coordinates", record_id)

        return Record(
            id=record_id,
            acc=f"{dna.get('accession', '')}:{start}-{end}",
            desc=model.get('ARO_description') or model.get('ARO_accession', ''),
            seq=SequenceType.NUCL.sanitize(dna['sequence']),
            seq_type=SequenceType.NUCL
        )
