import os
import sys
from pathlib import Path

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from gridsync.models.columns import ColumnDef  # noqa: E402
from gridsync.models.proxy import LoadingAwareProxyModel  # noqa: E402
from gridsync.models.row_store import RowStoreModel  # noqa: E402


class ManualPool:
    """Thread pool double that runs captured runnables on demand."""

    def __init__(self):
        self.runnables = []

    def start(self, runnable):
        self.runnables.append(runnable)

    def run(self, index=-1):
        runnable = self.runnables.pop(index)
        runnable.run()
        return runnable

    def run_all(self):
        while self.runnables:
            self.run(0)


COLUMNS = (
    ColumnDef("name", "Name"),
    ColumnDef("size", "Size"),
)


def make_rows(*names):
    return [
        {"id": name, "hierarchy": [name], "name": name, "size": index}
        for index, name in enumerate(names)
    ]


@pytest.fixture
def manual_pool():
    return ManualPool()


@pytest.fixture
def store(qapp):
    model = RowStoreModel()
    model.set_column_defs(COLUMNS)
    return model


@pytest.fixture
def proxy(store):
    model = LoadingAwareProxyModel()
    model.setSourceModel(store)
    return model
