import pytest

from projector.engine import ProjectorBackend, ProjectorConfig
from projector.metadata import MetadataConfig, MetadataResolver, StaticContentFetcher
from projector.projection import AgreementProjector, ArbitrationProjector, ProjectionAudit
from projector.storage import InMemoryEntityStore

from tests.fixtures import metadata_documents


@pytest.fixture
def store():
    return InMemoryEntityStore()


@pytest.fixture
def audit():
    return ProjectionAudit()


@pytest.fixture
def fetcher():
    return StaticContentFetcher(metadata_documents())


@pytest.fixture
def resolver(fetcher):
    return MetadataResolver(fetcher)


@pytest.fixture
def agreements(store, resolver, audit):
    return AgreementProjector(store, resolver, audit)


@pytest.fixture
def arbitration(store, audit):
    return ArbitrationProjector(store, audit)


@pytest.fixture
def backend(resolver):
    config = ProjectorConfig(metadata=MetadataConfig(enabled=False))
    return ProjectorBackend(config, store=InMemoryEntityStore(), resolver=resolver)
