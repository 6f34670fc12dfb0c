import json
import math
import sys

import numpy
import pytest
import torch

from corefscore.common import util
from corefscore.common.testing import CorefScoreTestCase
from corefscore.common.util import push_python_path
from corefscore.measures import BLANCScorer, PrecisionRecallPair


class TestCommonUtils(CorefScoreTestCase):
    def test_sanitize(self):
        assert util.sanitize(torch.Tensor([1, 2])) == [1, 2]
        assert util.sanitize(torch.LongTensor([1, 2])) == [1, 2]
        assert util.sanitize(numpy.array([0.5, 1.0])) == [0.5, 1.0]
        assert util.sanitize(numpy.float64(0.25)) == 0.25
        assert util.sanitize(numpy.bool_(True)) is True
        assert util.sanitize({"a": (1, 2), "b": {3}}) == {"a": [1, 2], "b": [3]}

    def test_sanitize_turns_nan_into_none(self):
        assert util.sanitize(float("nan")) is None
        assert util.sanitize(numpy.float64("nan")) is None
        assert util.sanitize({"muc_precision": math.nan}) == {"muc_precision": None}

    def test_sanitize_uses_to_json(self):
        result = BLANCScorer.multi().score([["a", "b"]], [["a"], ["b"]])
        sanitized = util.sanitize(result)
        assert sanitized["coref_precision"] == 0.0
        assert sanitized["coref_recall"] is None
        assert sanitized["score"] == 0.0

    def test_sanitize_rejects_unknown_types(self):
        with pytest.raises(ValueError, match="to_json"):
            util.sanitize(object())

    def test_freeze(self):
        assert util.freeze([[0, 1], [4, 4]]) == ((0, 1), (4, 4))
        assert util.freeze("a") == "a"
        assert util.freeze({"b": [1], "a": 2}) == (("a", 2), ("b", (1,)))
        hash(util.freeze([[0, [1, 2]], [3]]))

    def test_nan_to_zero(self):
        assert util.nan_to_zero(math.nan) == 0.0
        assert util.nan_to_zero(0.5) == 0.5

    def test_push_python_path(self):
        path = str(self.TEST_DIR / "extra")
        with push_python_path(path):
            assert sys.path[0] == path
        assert path not in sys.path

    def test_import_submodules(self):
        (self.TEST_DIR / "mymodule").mkdir()
        (self.TEST_DIR / "mymodule" / "__init__.py").touch()
        (self.TEST_DIR / "mymodule" / "submodule").mkdir()
        (self.TEST_DIR / "mymodule" / "submodule" / "__init__.py").touch()
        (self.TEST_DIR / "mymodule" / "submodule" / "subsubmodule.py").touch()

        with push_python_path(self.TEST_DIR):
            assert "mymodule" not in sys.modules
            assert "mymodule.submodule" not in sys.modules

            util.import_module_and_submodules("mymodule")

            assert "mymodule" in sys.modules
            assert "mymodule.submodule" in sys.modules
            assert "mymodule.submodule.subsubmodule" in sys.modules

    def test_dump_metrics(self):
        output_file = self.TEST_DIR / "metrics.json"
        metrics = {"documents": 2, "muc_precision": PrecisionRecallPair(0.5, 1.0).precision}
        util.dump_metrics(str(output_file), metrics, log=True)
        assert json.loads(output_file.read_text()) == metrics

    def test_dump_metrics_without_file(self, caplog):
        util.dump_metrics(None, {"documents": 0}, log=True)
        assert '"documents": 0' in caplog.text
