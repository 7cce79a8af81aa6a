#!/usr/bin/env python3

"""
Tests for the full-gene (open reading frame) check and deduplication.
"""

import os
import sys
import unittest

# Add the parent directory to the path to import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from seqdb_pipeline.core.data_structures import Record, SequenceType
from seqdb_pipeline.core.processors import (
    OrfValidator, SequenceDeduplicator, has_internal_stop, reverse_complement, translate
)


# ATG TTA GCT TAA reads M L A * ; its reverse complement has TAA as codon 3
CLEAN_ORF = "ATGTTAGCTTAA"
REVERSED_ORF = "TTAAGCTAACAT"
# Internal stops on both strands
BROKEN_ORF = "TAATTAAAA"


class TestSequenceHelpers(unittest.TestCase):

    def test_translate(self):
        self.assertEqual(translate("ATGAAATAG"), "MK*")

    def test_reverse_complement(self):
        self.assertEqual(reverse_complement(CLEAN_ORF), REVERSED_ORF)
        self.assertEqual(reverse_complement(REVERSED_ORF), CLEAN_ORF)

    def test_internal_stop(self):
        self.assertFalse(has_internal_stop("ATGAAATAG"))
        self.assertFalse(has_internal_stop("ATGAAA"))
        self.assertTrue(has_internal_stop("ATGTAAAAATAG"))
        self.assertTrue(has_internal_stop(REVERSED_ORF))


class TestOrfValidator(unittest.TestCase):
    """Test the full-gene check."""

    def setUp(self):
        self.validator = OrfValidator()

    def test_clean_gene_passes(self):
        record = Record(id="good", seq="ATGAAATAG")
        self.assertEqual(self.validator.check(record), 9)
        self.assertEqual(record.seq, "ATGAAATAG")

    def test_length_not_multiple_of_three(self):
        record = Record(id="short", seq="ATGAAATA")
        with self.assertLogs(level='WARNING') as cm:
            self.assertEqual(self.validator.check(record), 0)
        self.assertIn("not multiple of 3", cm.output[0])

    def test_ambiguous_bases_rejected(self):
        record = Record(id="amb", seq="ATGNAATAG")
        with self.assertLogs(level='WARNING') as cm:
            self.assertEqual(self.validator.check(record), 0)
        self.assertIn("non-AGTC", cm.output[0])
        self.assertEqual(record.seq, "ATGNAATAG")

    def test_reverse_complement_repair(self):
        """A gene stored on the opposite strand is flipped and accepted."""
        record = Record(id="flipped", seq=REVERSED_ORF)

        with self.assertLogs(level='INFO'):
            length = self.validator.check(record)

        self.assertEqual(length, 12)
        self.assertEqual(record.seq, CLEAN_ORF)
        self.assertEqual(self.validator.get_summary()['repaired'], 1)

    def test_unresolvable_internal_stop(self):
        record = Record(id="broken", seq=BROKEN_ORF)

        with self.assertLogs(level='WARNING') as cm:
            self.assertEqual(self.validator.check(record), 0)

        self.assertEqual(record.seq, BROKEN_ORF)
        self.assertTrue(any("reverse complement has internal stop" in line for line in cm.output))

    def test_protein_records_skipped(self):
        record = Record(id="prot", seq="MKV*X", seq_type=SequenceType.PROT)
        self.assertEqual(self.validator.check(record), 5)
        self.assertEqual(self.validator.get_summary()['checked'], 0)

    def test_summary_counts(self):
        for seq in ("ATGAAATAG", "ATGA", REVERSED_ORF, BROKEN_ORF):
            self.validator.check(Record(id="r", seq=seq))

        self.assertEqual(self.validator.get_summary(),
                         {'checked': 4, 'rejected': 2, 'repaired': 1})


class TestSequenceDeduplicator(unittest.TestCase):
    """Test exact-sequence deduplication."""

    def _records(self):
        return [
            Record(id="first", seq="AAA"),
            Record(id="second", seq="CCC"),
            Record(id="copy_of_first", seq="AAA"),
            Record(id="third", seq="GGG"),
            Record(id="copy_of_second", seq="CCC"),
            Record(id="lowercase_differs", seq="ccc"),
        ]

    def test_first_occurrence_kept_in_order(self):
        dedup = SequenceDeduplicator()

        with self.assertLogs(level='WARNING') as cm:
            kept = dedup.deduplicate(self._records())

        self.assertEqual([r.id for r in kept], ["first", "second", "third", "lowercase_differs"])
        self.assertEqual(dedup.collisions, [("copy_of_first", "first"), ("copy_of_second", "second")])
        self.assertIn("copy_of_first same as first", cm.output[0])

    def test_no_equal_sequences_remain(self):
        kept = SequenceDeduplicator().deduplicate(self._records())
        sequences = [r.seq for r in kept]
        self.assertEqual(len(sequences), len(set(sequences)))

    def test_idempotent(self):
        once = SequenceDeduplicator().deduplicate(self._records())
        second = SequenceDeduplicator()
        twice = second.deduplicate(list(once))

        self.assertEqual(twice, once)
        self.assertEqual(second.collisions, [])

    def test_ids_do_not_matter(self):
        records = [Record(id="same", seq="AAA"), Record(id="same", seq="CCC")]
        self.assertEqual(len(SequenceDeduplicator().deduplicate(records)), 2)


if __name__ == '__main__':
    unittest.main()
