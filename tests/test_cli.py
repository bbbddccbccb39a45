"""Tests for the depot command-line interface"""

import gzip
import json
import shutil
import subprocess
from pathlib import Path

import pytest
from typer.testing import CliRunner

from depot import __version__
from depot.cli.main import app
from depot.infrastructure.index_cache import read_index


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def invoke(runner: CliRunner, root_dir: Path):
    """Run the CLI against the test repository root"""
    def _invoke(*args: str):
        return runner.invoke(app, ["--root", str(root_dir), *args])
    return _invoke


def index_entries(root_dir: Path):
    return list(read_index(root_dir / "modules" / "02packages.details.txt.gz"))


class TestRepositoryCommands:
    """Test init and index commands"""
    
    def test_version(self, runner: CliRunner):
        """Test version output"""
        result = runner.invoke(app, ["--version"])
        
        assert result.exit_code == 0
        assert __version__ in result.output
    
    def test_init(self, invoke, root_dir: Path):
        """Test init creates the repository layout"""
        result = invoke("init")
        
        assert result.exit_code == 0, result.output
        assert "Repository initialized" in result.output
        assert (root_dir / "authors" / "id").is_dir()
        assert (root_dir / ".depot" / "depot.db").is_file()
        assert index_entries(root_dir) == []
    
    def test_init_is_repeatable(self, invoke):
        """Test init on an existing repository succeeds"""
        assert invoke("init").exit_code == 0
        assert invoke("init").exit_code == 0
    
    def test_index(self, invoke, root_dir: Path, make_archive):
        """Test the index command rewrites the index"""
        invoke("add", str(make_archive("Foo-1.00", modules={"Foo": "1.00"})), "--author", "ALICE")
        (root_dir / "modules" / "02packages.details.txt.gz").unlink()
        
        result = invoke("index")
        
        assert result.exit_code == 0, result.output
        assert index_entries(root_dir) == [("Foo", "1.00", "A/AL/ALICE/Foo-1.00.tar.gz")]


class TestDistributionCommands:
    """Test add, import, remove and list commands"""
    
    def test_add(self, invoke, root_dir: Path, make_archive):
        """Test adding an archive stores it and updates the index"""
        archive = make_archive("Foo-1.00", modules={"Foo": "1.00"})
        
        result = invoke("add", str(archive), "--author", "alice")
        
        assert result.exit_code == 0, result.output
        assert "Added A/AL/ALICE/Foo-1.00.tar.gz providing 1 packages" in result.output
        assert (root_dir / "authors" / "id" / "A" / "AL" / "ALICE" / "Foo-1.00.tar.gz").is_file()
        assert index_entries(root_dir) == [("Foo", "1.00", "A/AL/ALICE/Foo-1.00.tar.gz")]
    
    def test_add_debug_shows_details(self, runner: CliRunner, root_dir: Path, make_archive):
        """Test --debug prints the stored distribution"""
        archive = make_archive("Foo-1.00", modules={"Foo": "1.00"})
        
        result = runner.invoke(app, ["--root", str(root_dir), "--debug", "add", str(archive), "-a", "ALICE"])
        
        assert result.exit_code == 0, result.output
        assert "Packages: Foo-1.00" in result.output
    
    def test_add_json_output(self, runner: CliRunner, root_dir: Path, make_archive):
        """Test status messages follow the output format"""
        archive = make_archive("Foo-1.00", modules={"Foo": "1.00"})
        
        result = runner.invoke(app, ["--root", str(root_dir), "--output", "json", "add", str(archive), "-a", "ALICE"])
        
        assert result.exit_code == 0, result.output
        assert '"status": "success"' in result.output
    
    def test_add_ownership_conflict(self, invoke, make_archive):
        """Test a conflicting add exits with an error"""
        invoke("add", str(make_archive("Foo-1.00", modules={"Foo": "1.00"})), "--author", "ALICE")
        
        result = invoke("add", str(make_archive("Foo-1.01", modules={"Foo": "1.01"})), "--author", "BOB")
        
        assert result.exit_code == 1
        assert "Only author ALICE can update package Foo" in result.output
    
    def test_add_missing_archive(self, invoke, tmp_path: Path):
        """Test adding a missing archive exits with an error"""
        result = invoke("add", str(tmp_path / "Nope-1.0.tar.gz"), "--author", "ALICE")
        
        assert result.exit_code == 1
        assert "does not exist" in result.output
    
    def test_import_from_file_mirror(self, invoke, root_dir: Path, make_archive, tmp_path: Path):
        """Test importing from a local mirror"""
        mirror = tmp_path / "mirror" / "authors" / "id" / "B" / "BO" / "BOB"
        archive = make_archive("Bar-2.0", modules={"Bar": "2.0"}, directory=mirror)
        
        result = invoke("import", archive.as_uri())
        
        assert result.exit_code == 0, result.output
        assert "Imported B/BO/BOB/Bar-2.0.tar.gz" in result.output
        assert index_entries(root_dir) == [("Bar", "2.0", "B/BO/BOB/Bar-2.0.tar.gz")]
    
    def test_remove(self, invoke, root_dir: Path, make_archive):
        """Test removing a distribution"""
        invoke("add", str(make_archive("Foo-1.00", modules={"Foo": "1.00"})), "--author", "ALICE")
        
        result = invoke("remove", "A/AL/ALICE/Foo-1.00.tar.gz")
        
        assert result.exit_code == 0, result.output
        assert "Removed A/AL/ALICE/Foo-1.00.tar.gz" in result.output
        assert not (root_dir / "authors" / "id" / "A" / "AL" / "ALICE" / "Foo-1.00.tar.gz").exists()
        assert index_entries(root_dir) == []
    
    def test_remove_missing(self, invoke):
        """Test removing an unknown path exits with an error"""
        result = invoke("remove", "A/AL/ALICE/Nope-1.0.tar.gz")
        
        assert result.exit_code == 1
        assert "Distribution A/AL/ALICE/Nope-1.0.tar.gz does not exist" in result.output


class TestLocateCommand:
    """Test remote lookups from the CLI"""
    
    @pytest.fixture
    def mirror(self, tmp_path: Path, monkeypatch) -> Path:
        mirror = tmp_path / "mirror"
        index = mirror / "modules" / "02packages.details.txt.gz"
        index.parent.mkdir(parents=True)
        content = (
            "File:         02packages.details.txt\n\n"
            "Bar                 2.0  B/BO/BOB/Bar-2.0.tar.gz\n"
        )
        index.write_bytes(gzip.compress(content.encode("utf-8")))
        monkeypatch.setenv("DEPOT_SOURCES", json.dumps([mirror.as_uri()]))
        return mirror
    
    def test_locate(self, invoke, mirror: Path):
        """Test a package is located on the configured source"""
        result = invoke("locate", "Bar")
        
        assert result.exit_code == 0, result.output
        assert f"{mirror.as_uri()}/authors/id/B/BO/BOB/Bar-2.0.tar.gz" in result.output
    
    def test_locate_unknown(self, invoke, mirror: Path):
        """Test an unknown package exits with an error"""
        result = invoke("locate", "Nope")
        
        assert result.exit_code == 1
        assert "not found" in result.output


@pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")
class TestGitBackedCommands:
    """Test commit and tag handling with the git store"""
    
    @pytest.fixture(autouse=True)
    def git_backend(self, monkeypatch):
        monkeypatch.setenv("DEPOT_STORE_BACKEND", "git")
    
    def git(self, root_dir: Path, *args: str) -> str:
        result = subprocess.run(
            ["git", *args],
            cwd=str(root_dir),
            check=True,
            capture_output=True,
            text=True
        )
        return result.stdout.strip()
    
    def test_add_commits_and_tags(self, invoke, root_dir: Path, make_archive):
        """Test mutating commands commit with the message and tag"""
        archive = make_archive("Foo-1.00", modules={"Foo": "1.00"})
        
        result = invoke("add", str(archive), "--author", "ALICE", "-m", "Release Foo", "--tag", "foo-1.00")
        
        assert result.exit_code == 0, result.output
        assert self.git(root_dir, "log", "-1", "--format=%s") == "Release Foo"
        assert self.git(root_dir, "tag") == "foo-1.00"
        files = self.git(root_dir, "ls-files").split()
        assert "authors/id/A/AL/ALICE/Foo-1.00.tar.gz" in files
        assert "modules/02packages.details.txt.gz" in files
    
    def test_no_commit(self, invoke, root_dir: Path, make_archive):
        """Test --no-commit leaves the changes staged"""
        invoke("init")
        head = self.git(root_dir, "rev-parse", "HEAD")
        
        result = invoke("add", str(make_archive("Foo-1.00", modules={"Foo": "1.00"})),
                        "--author", "ALICE", "--no-commit")
        
        assert result.exit_code == 0, result.output
        assert self.git(root_dir, "rev-parse", "HEAD") == head
        assert "authors/id/A/AL/ALICE/Foo-1.00.tar.gz" in self.git(root_dir, "diff", "--cached", "--name-only")
