#!/usr/bin/env python3

"""
Tests for the per-source header adapters and the adapter registry.

Every adapter is exercised on in-memory content; nothing is downloaded.
"""

import io
import json
import os
import sys
import tempfile
import unittest
from pathlib import Path

# Add the parent directory to the path to import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from seqdb_pipeline.adapters import ADAPTER_REGISTRY, available_sources, get_adapter
from seqdb_pipeline.adapters.argannot import ArgAnnotAdapter
from seqdb_pipeline.adapters.bacmet2 import BacMet2Adapter
from seqdb_pipeline.adapters.card import CardAdapter
from seqdb_pipeline.adapters.ecoh import EcohAdapter
from seqdb_pipeline.adapters.ecoli_vf import EcoliVfAdapter
from seqdb_pipeline.adapters.ncbi import NcbiAdapter
from seqdb_pipeline.adapters.plasmidfinder import PlasmidFinderAdapter
from seqdb_pipeline.adapters.resfinder import ResFinderAdapter, parse_notes
from seqdb_pipeline.adapters.vfdb import VfdbAdapter
from seqdb_pipeline.core.data_structures import SequenceType
from seqdb_pipeline.core.exceptions import AdapterError, UnknownSourceError


class TestRegistry(unittest.TestCase):

    def test_all_sources_registered(self):
        self.assertEqual(available_sources(), [
            'argannot', 'bacmet2', 'card', 'ecoh', 'ecoli_vf',
            'ncbi', 'plasmidfinder', 'resfinder', 'vfdb'
        ])

    def test_get_adapter(self):
        adapter = get_adapter('card')
        self.assertIsInstance(adapter, CardAdapter)
        self.assertEqual(adapter.name, 'card')

    def test_unknown_source_lists_valid_names(self):
        with self.assertRaises(UnknownSourceError) as ctx:
            get_adapter('megares')
        self.assertEqual(ctx.exception.valid_names, sorted(ADAPTER_REGISTRY))
        self.assertIn('resfinder', str(ctx.exception))

    def test_molecule_types(self):
        self.assertIs(get_adapter('bacmet2').seq_type, SequenceType.PROT)
        for name in available_sources():
            if name != 'bacmet2':
                self.assertIs(get_adapter(name).seq_type, SequenceType.NUCL)


class TestResFinder(unittest.TestCase):

    def test_header_and_annotation(self):
        adapter = ResFinderAdapter(notes=parse_notes(["aac(6')-Ib:some:Aminoglycoside resistance"]))
        records = adapter.convert_text(">aac(6')-Ib_1_AB098234\nATGAAATAG\n")

        self.assertEqual(records[0].id, "aac(6')-Ib_1")
        self.assertEqual(records[0].acc, "AB098234")
        self.assertEqual(records[0].desc, "Aminoglycoside resistance")

    def test_missing_annotation_gives_empty_description(self):
        records = ResFinderAdapter().convert_text(">blaTEM-1B_1_JF910132 extra\nATG\n")
        self.assertEqual(records[0].id, "blaTEM-1B_1")
        self.assertEqual(records[0].desc, "")

    def test_parse_notes(self):
        notes = parse_notes([
            "# comment line\n",
            "blaOXA-48:Beta-lactam:Carbapenemase: class D\r\n",
            "\n",
            "tet(M):Tetracycline:\n",
        ])

        self.assertEqual(notes, {
            "blaOXA-48": "Carbapenemase: class D",
            "tet(M)": "",
        })

    def test_repeated_header_keeps_accession(self):
        """The occurrence suffix goes on the rewritten ID, not into the accession."""
        adapter = ResFinderAdapter(notes={"blaX": "beta-lactamase"})

        with self.assertLogs(level='WARNING') as cm:
            records = adapter.convert_text(">blaX_1_AB000001\nATG\n>blaX_1_AB000001\nATGATG\n")

        self.assertEqual([r.id for r in records], ["blaX_1", "blaX_1_2"])
        self.assertEqual([r.acc for r in records], ["AB000001", "AB000001"])
        self.assertEqual([r.desc for r in records], ["beta-lactamase", "beta-lactamase"])
        self.assertIn("renamed to 'blaX_1_2'", cm.output[0])

    def test_same_name_different_accession_not_renamed(self):
        records = ResFinderAdapter().convert_text(">blaX_1_AB000001\nATG\n>blaX_1_AB000002\nCCC\n")
        self.assertEqual([(r.id, r.acc) for r in records],
                         [("blaX_1", "AB000001"), ("blaX_1", "AB000002")])

    def test_bad_header(self):
        with self.assertRaises(AdapterError):
            ResFinderAdapter().convert_text(">blaTEM\nATG\n")

    def test_load_directory(self):
        with tempfile.TemporaryDirectory() as tmp:
            source = Path(tmp)
            (source / "notes.txt").write_text("tet(M):Tetracycline:Ribosomal protection\r\n")
            (source / "tetracycline.fsa").write_text(">tet(M)_1_X92947\nATGAAATAG\n")
            (source / "beta-lactam.fsa").write_text(">blaTEM-1B_1_JF910132\nATGCCCTAG\n")
            (source / "README.md").write_text("not a sequence file\n")

            records = ResFinderAdapter().load(source)

        self.assertEqual([r.id for r in records], ["blaTEM-1B_1", "tet(M)_1"])
        self.assertEqual(records[1].desc, "Ribosomal protection")


class TestPlasmidFinder(unittest.TestCase):

    def setUp(self):
        self.adapter = PlasmidFinderAdapter()

    def test_accession_split(self):
        record = self.adapter.convert_text(">IncFIB_AP001918.1\nATG\n")[0]
        self.assertEqual((record.id, record.acc, record.desc), ("IncFIB", "AP001918.1", "IncFIB_AP001918.1"))

    def test_refseq_accession(self):
        record = self.adapter.convert_text(">rep7_1_repC(Cassette)_NC_010063.1\nATG\n")[0]
        self.assertEqual(record.id, "rep7_1_repC(Cassette)")
        self.assertEqual(record.acc, "NC_010063.1")

    def test_trailing_underscores_stripped(self):
        record = self.adapter.convert_text(">IncX1__AB123456\nATG\n")[0]
        self.assertEqual((record.id, record.acc), ("IncX1", "AB123456"))

    def test_no_accession_warns(self):
        with self.assertLogs(level='WARNING'):
            record = self.adapter.convert_text(">Col156\nATG\n")[0]
        self.assertEqual((record.id, record.acc, record.desc), ("Col156", "", "Col156"))

    def test_repeated_header_keeps_accession(self):
        with self.assertLogs(level='WARNING'):
            records = self.adapter.convert_text(">IncFIB_AP001918.1\nATG\n>IncFIB_AP001918.1\nCCC\n")

        self.assertEqual([(r.id, r.acc) for r in records],
                         [("IncFIB", "AP001918.1"), ("IncFIB_2", "AP001918.1")])

    def test_empty_name_keeps_original(self):
        with self.assertLogs(level='WARNING'):
            record = self.adapter.convert_text(">_AB123456\nATG\n")[0]
        self.assertEqual((record.id, record.acc), ("_AB123456", "AB123456"))


class TestArgAnnot(unittest.TestCase):

    def test_header(self):
        record = ArgAnnotAdapter().convert_text(">(AGly)AadA6:AF140629:2289-3080:792\nATG\n")[0]
        self.assertEqual(record.id, "(AGly)AadA6")
        self.assertEqual(record.acc, "AF140629:2289-3080")
        self.assertEqual(record.desc, "")

    def test_escape_characters_removed(self):
        text = ">(Bla)\x1bTEM-1:AY458016:1-861:861\x1b\r\nATG\x1bAAA\r\n"
        record = ArgAnnotAdapter().convert_text(text)[0]
        self.assertEqual(record.id, "(Bla)TEM-1")
        self.assertEqual(record.acc, "AY458016:1-861")
        self.assertEqual(record.seq, "ATGAAA")

    def test_bad_header(self):
        with self.assertRaises(AdapterError):
            ArgAnnotAdapter().convert_text(">(Bla)TEM-1:AY458016\nATG\n")


class TestBacMet2(unittest.TestCase):

    def test_header(self):
        record = BacMet2Adapter().convert_text(
            ">BAC0098|ctpC|sp|P0A502|CTPC_MYCTU Probable manganese exporting P-type ATPase\nMAEKpr*\n"
        )[0]
        self.assertEqual(record.id, "ctpC-BAC0098")
        self.assertEqual(record.acc, "sp:P0A502")
        self.assertEqual(record.desc, "Probable manganese exporting P-type ATPase")
        self.assertEqual(record.seq, "MAEKPRX")
        self.assertIs(record.seq_type, SequenceType.PROT)

    def test_bad_header(self):
        with self.assertRaises(AdapterError):
            BacMet2Adapter().convert_text(">BAC0098|ctpC\nMAEK\n")


def _card_model(name, sequences, model_type="protein homolog model", **extra):
    model = {
        "model_name": name,
        "model_type": model_type,
        "model_param": {},
        "model_sequences": {"sequence": sequences},
        "ARO_accession": "3000001",
    }
    model.update(extra)
    return model


def _card_sequence(accession, fmin, fmax, sequence):
    return {"dna_sequence": {"accession": accession, "fmin": fmin, "fmax": fmax,
                             "strand": "+", "sequence": sequence}}


class TestCard(unittest.TestCase):

    def setUp(self):
        self.adapter = CardAdapter()

    def test_protein_homolog_models_only(self):
        data = {
            "_version": "3.2.9",
            "_comment": "metadata",
            "200": _card_model("NDM-1", {"5": _card_sequence("FN396876", "100", "913", "atgaaatag")},
                               ARO_description="NDM-1 is a metallo-beta-lactamase"),
            "100": _card_model("gyrA mutant", {}, model_type="protein variant model"),
        }

        records = self.adapter.parse_models(data)

        self.assertEqual(len(records), 1)
        self.assertEqual(records[0].id, "NDM-1")
        self.assertEqual(records[0].acc, "FN396876:101-914")
        self.assertEqual(records[0].desc, "NDM-1 is a metallo-beta-lactamase")
        self.assertEqual(records[0].seq, "ATGAAATAG")

    def test_name_whitespace_and_first_sorted_sequence(self):
        sequences = {
            "2": _card_sequence("AAA1", 0, 8, "CCCCCCCCC"),
            "10": _card_sequence("BBB2", 10, 18, "ATGAAATAG"),
        }
        record = self.adapter.parse_models({"1": _card_model("Escherichia coli  ampC", sequences)})[0]

        self.assertEqual(record.id, "Escherichia_coli_ampC")
        self.assertEqual(record.acc, "BBB2:11-19")
        self.assertEqual(record.desc, "3000001")

    def test_snp_model_is_fatal(self):
        model = _card_model("rpoB", {"1": _card_sequence("X", 0, 2, "ATG")},
                            model_param={"snp": {"param_value": {"1": "S531L"}}})
        with self.assertRaises(AdapterError):
            self.adapter.parse_models({"1": model})

    def test_missing_sequence_is_fatal(self):
        with self.assertRaises(AdapterError):
            self.adapter.parse_models({"1": _card_model("tetX", {})})

    def test_load_json_file(self):
        data = {"1": _card_model("OXA-48", {"1": _card_sequence("AY236073", 0, 8, "ATGAAATAG")})}
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "card.json"
            path.write_text(json.dumps(data))
            records = self.adapter.load(path)

        self.assertEqual(records[0].id, "OXA-48")

    def test_load_missing_file(self):
        with self.assertRaises(AdapterError):
            self.adapter.load(Path("/nonexistent/card.json"))


class TestVfdb(unittest.TestCase):

    HEADER = (">VFG037176(gb|WP_001081735) (plc1) phospholipase C "
              "[Phospholipase C (VF0470) - Exotoxin (VFC0235)] [Acinetobacter baumannii ACICU]")

    def test_header(self):
        record = VfdbAdapter().convert_text(self.HEADER + "\nATG\n")[0]
        self.assertEqual(record.id, "plc1")
        self.assertEqual(record.acc, "WP_001081735")
        self.assertTrue(record.desc.startswith("(plc1) phospholipase C"))

    def test_no_gene_name_uses_vfg_token(self):
        with self.assertLogs(level='WARNING'):
            record = VfdbAdapter().convert_text(">VFG000001(gb|NP_460360.1) hypothetical\nATG\n")[0]
        self.assertEqual(record.id, "VFG000001")
        self.assertEqual(record.acc, "NP_460360.1")

    def test_bad_header(self):
        with self.assertRaises(AdapterError):
            VfdbAdapter().convert_text(">VFG037176 (plc1) phospholipase C\nATG\n")


def _locus(name, length):
    return "LOCUS       " + name.ljust(16) + str(length).rjust(12) + " bp    DNA     linear   BCT 15-FEB-2017"


GENBANK = "\n".join([
    _locus("NG_047831", 30),
    "DEFINITION  Escherichia coli blaTEM-1 gene.",
    "ACCESSION   NG_047831",
    "VERSION     NG_047831.1",
    "KEYWORDS    .",
    "SOURCE      Escherichia coli",
    "  ORGANISM  Escherichia coli",
    "            Bacteria.",
    "FEATURES             Location/Qualifiers",
    "     source          1..30",
    "                     /organism=\"Escherichia coli\"",
    "     gene            4..12",
    "                     /gene=\"blaTEM\"",
    "     CDS             4..12",
    "                     /gene=\"blaTEM\"",
    "                     /allele=\"blaTEM-1\"",
    "                     /locus_tag=\"A7J11_00001\"",
    "                     /product=\"class A beta-lactamase TEM-1\"",
    "ORIGIN",
    "        1 aaaatgaaat agcccgggtt tcccgggaaa",
    "//",
    _locus("NG_050000", 15),
    "DEFINITION  Spliced test gene.",
    "ACCESSION   NG_050000",
    "VERSION     NG_050000.1",
    "KEYWORDS    .",
    "SOURCE      Escherichia coli",
    "  ORGANISM  Escherichia coli",
    "            Bacteria.",
    "FEATURES             Location/Qualifiers",
    "     source          1..15",
    "                     /organism=\"Escherichia coli\"",
    "     CDS             join(1..3,7..12)",
    "                     /gene=\"qnrS1\"",
    "                     /locus_tag=\"A7J11_00002\"",
    "                     /product=\"quinolone resistance protein QnrS1\"",
    "ORIGIN",
    "        1 atgcccaaat gaggg",
    "//",
    "",
])

GENBANK_NO_CDS = "\n".join([
    _locus("NG_060000", 9),
    "DEFINITION  No coding sequence.",
    "ACCESSION   NG_060000",
    "VERSION     NG_060000.1",
    "KEYWORDS    .",
    "SOURCE      Escherichia coli",
    "  ORGANISM  Escherichia coli",
    "            Bacteria.",
    "FEATURES             Location/Qualifiers",
    "     source          1..9",
    "                     /organism=\"Escherichia coli\"",
    "ORIGIN",
    "        1 atgaaatag",
    "//",
    "",
])


class TestNcbi(unittest.TestCase):

    def test_first_cds_tags(self):
        records = NcbiAdapter().parse_genbank(io.StringIO(GENBANK))

        self.assertEqual(len(records), 2)
        self.assertEqual(records[0].id, "blaTEM-1")
        self.assertEqual(records[0].acc, "A7J11_00001")
        self.assertEqual(records[0].desc, "class A beta-lactamase TEM-1")
        self.assertEqual(records[0].seq, "ATGAAATAG")

    def test_gene_fallback_and_splicing(self):
        record = NcbiAdapter().parse_genbank(io.StringIO(GENBANK))[1]

        self.assertEqual(record.id, "qnrS1")
        self.assertEqual(record.acc, "A7J11_00002")
        self.assertEqual(record.seq, "ATGAAATGA")

    def test_missing_cds_is_fatal(self):
        with self.assertRaises(AdapterError):
            NcbiAdapter().parse_genbank(io.StringIO(GENBANK_NO_CDS))


class TestEcoh(unittest.TestCase):

    def test_header(self):
        record = EcohAdapter().convert_text(">1__fliC__fliC-H1__1 AB028471.1;flagellin;H1\nATG\n")[0]
        self.assertEqual(record.id, "fliC-H1")
        self.assertEqual(record.acc, "AB028471.1")
        self.assertEqual(record.desc, "flagellin H1")

    def test_bad_header(self):
        with self.assertRaises(AdapterError):
            EcohAdapter().convert_text(">1__fliC AB028471.1;flagellin;H1\nATG\n")

    def test_missing_description(self):
        with self.assertRaises(AdapterError):
            EcohAdapter().convert_text(">1__fliC__fliC-H1__1\nATG\n")


class TestEcoliVf(unittest.TestCase):

    def setUp(self):
        self.adapter = EcoliVfAdapter()

    def test_token_with_accession(self):
        record = self.adapter.convert_text(
            ">VFG000935(gi:2865308) (stx2A) Shiga toxin 2 subunit A [Escherichia coli O157:H7]\nATG\n"
        )[0]
        self.assertEqual(record.id, "stx2A")
        self.assertEqual(record.acc, "gi:2865308")
        self.assertEqual(record.desc, "Shiga toxin 2 subunit A")

    def test_token_with_parenthetical_description(self):
        record = self.adapter.convert_text(">ECs1205 (stx2A) Shiga toxin 2 subunit A\nATG\n")[0]
        self.assertEqual((record.id, record.acc, record.desc), ("stx2A", "ECs1205", "Shiga toxin 2 subunit A"))

    def test_token_only(self):
        record = self.adapter.convert_text(">aafA fimbrial protein [Escherichia coli 042]\nATG\n")[0]
        self.assertEqual((record.id, record.acc, record.desc), ("aafA", "aafA", "fimbrial protein"))

    def test_unparseable_header(self):
        with self.assertRaises(AdapterError):
            self.adapter.convert_text(">bad(token description\nATG\n")

    def test_glued_header_repaired(self):
        text = ">ECs1205 (stx2A) Shiga toxin\nATGAAA>ECs1206 (stx2B) Shiga toxin B\nCCCTAG\n"
        records = self.adapter.convert_text(text)

        self.assertEqual([r.id for r in records], ["stx2A", "stx2B"])
        self.assertEqual(records[0].seq, "ATGAAA")
        self.assertEqual(records[1].seq, "CCCTAG")


if __name__ == '__main__':
    unittest.main()
