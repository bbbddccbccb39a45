"""Tests for the metadata backend"""

import pytest

from depot.core.distribution import LOCAL_SOURCE
from depot.core.exceptions import DistributionNotFoundError, DuplicatePathError
from depot.infrastructure.database import MetadataBackend
from depot.infrastructure.database.models import DistributionModel, PackageModel


def new_distribution(path: str, source: str = LOCAL_SOURCE) -> DistributionModel:
    return DistributionModel(path=path, source=source)


class TestMetadataBackend:
    """Test distribution and package persistence"""
    
    @pytest.mark.asyncio
    async def test_create_distribution_with_packages(self, metadata: MetadataBackend):
        """Test a distribution is stored with its packages"""
        dist = await metadata.create_distribution_with_packages(
            new_distribution("A/AL/ALICE/Foo-1.00.tar.gz"),
            [PackageModel(name="Foo", version="1.00"), PackageModel(name="Foo::Bar", version="1.00")],
        )
        
        assert dist.id is not None
        
        found = await metadata.find_distribution_by_path("A/AL/ALICE/Foo-1.00.tar.gz")
        assert found is not None
        assert found.author == "ALICE"
        assert found.is_local
        assert [pkg.vname for pkg in found.packages] == ["Foo-1.00", "Foo::Bar-1.00"]
    
    @pytest.mark.asyncio
    async def test_duplicate_path(self, metadata: MetadataBackend):
        """Test a second distribution on the same path is rejected"""
        path = "A/AL/ALICE/Foo-1.00.tar.gz"
        await metadata.create_distribution_with_packages(new_distribution(path), [])
        
        with pytest.raises(DuplicatePathError):
            await metadata.create_distribution_with_packages(
                new_distribution(path),
                [PackageModel(name="Foo", version="1.00")],
            )
        
        assert await metadata.find_packages(name="Foo") == []
    
    @pytest.mark.asyncio
    async def test_find_packages_newest_first(self, metadata: MetadataBackend):
        """Test package lookups return the newest distribution first"""
        await metadata.create_distribution_with_packages(
            new_distribution("A/AL/ALICE/Foo-1.00.tar.gz"),
            [PackageModel(name="Foo", version="1.00")],
        )
        await metadata.create_distribution_with_packages(
            new_distribution("A/AL/ALICE/Foo-1.01.tar.gz"),
            [PackageModel(name="Foo", version="1.01")],
        )
        
        rows = await metadata.find_packages(name="Foo")
        
        assert [(pkg.version, dist.path) for pkg, dist in rows] == [
            ("1.01", "A/AL/ALICE/Foo-1.01.tar.gz"),
            ("1.00", "A/AL/ALICE/Foo-1.00.tar.gz"),
        ]
    
    @pytest.mark.asyncio
    async def test_find_packages_by_source(self, metadata: MetadataBackend):
        """Test package lookups can be restricted to local distributions"""
        await metadata.create_distribution_with_packages(
            new_distribution("B/BO/BOB/Foo-9.0.tar.gz", source="http://cpan.example.org"),
            [PackageModel(name="Foo", version="9.0")],
        )
        
        assert await metadata.find_packages(name="Foo", source=LOCAL_SOURCE) == []
        assert len(await metadata.find_packages(name="Foo")) == 1
    
    @pytest.mark.asyncio
    async def test_delete_distribution_cascades(self, metadata: MetadataBackend):
        """Test deleting a distribution deletes its packages"""
        dist = await metadata.create_distribution_with_packages(
            new_distribution("A/AL/ALICE/Foo-1.00.tar.gz"),
            [PackageModel(name="Foo", version="1.00")],
        )
        
        await metadata.delete_distribution(dist)
        
        assert await metadata.find_distribution_by_path(dist.path) is None
        assert await metadata.find_packages() == []
    
    @pytest.mark.asyncio
    async def test_delete_missing_distribution(self, metadata: MetadataBackend):
        """Test deleting a vanished distribution raises DistributionNotFoundError"""
        dist = await metadata.create_distribution_with_packages(
            new_distribution("A/AL/ALICE/Foo-1.00.tar.gz"), []
        )
        await metadata.delete_distribution(dist)
        
        with pytest.raises(DistributionNotFoundError):
            await metadata.delete_distribution(dist)
    
    @pytest.mark.asyncio
    async def test_list_distributions(self, metadata: MetadataBackend):
        """Test all distributions are listed"""
        for path in ("A/AL/ALICE/Foo-1.00.tar.gz", "B/BO/BOB/Bar-2.0.tar.gz"):
            await metadata.create_distribution_with_packages(new_distribution(path), [])
        
        paths = [dist.path for dist in await metadata.list_distributions()]
        
        assert sorted(paths) == ["A/AL/ALICE/Foo-1.00.tar.gz", "B/BO/BOB/Bar-2.0.tar.gz"]
