import pytest

from jwt_phpunit.config import PLUGIN_NAME, ProjectConfiguration

# Relative to test/
TEST_FILES = [
    "unit/BarTest.php",
    "unit/AlphaTest.php",
    "unit/README.txt",
    "unit/lib/ModelTest.php",
    "functional/frontend/HomeTest.php",
    "functional/frontend/LoginTest.php",
    "functional/backend/AdminTest.php",
]


def touch(path, content="<?php\n"):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


class FakeRunner:
    """Stands in for PhpUnitRunner and records every suite it is asked to run."""

    def __init__(self, output="OK (3 tests, 3 assertions)", return_code=0, xml_content=None):
        self.output = output
        self.return_code = return_code
        self.xml_content = xml_content
        self.error = None
        self.calls = []

    def do_run(self, suite, options=None, bootstrap=None, trace_filter=None, env=None):
        self.calls.append({
            "suite": suite,
            "options": options,
            "bootstrap": bootstrap,
            "trace_filter": trace_filter,
            "env": env,
        })
        if self.error is not None:
            raise self.error
        return self.output, self.return_code, self.xml_content


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in ("SF_ROOT_DIR", "SF_PLUGINS_DIR", "SF_SYMFONY_LIB_DIR", "PHPUNIT_BINARY", "PHP_BINARY"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def project_root(tmp_path):
    root = tmp_path / "project"
    (root / "apps" / "frontend").mkdir(parents=True)
    touch(root / "plugins" / PLUGIN_NAME / "test" / "bootstrap" / "phpunit.php")
    for rel in TEST_FILES:
        touch(root / "test" / rel)
    return root


@pytest.fixture
def configuration(project_root):
    return ProjectConfiguration(str(project_root))


@pytest.fixture
def fake_runner():
    return FakeRunner()
