"""Unit tests for the DiscoveryEngine ranking."""

import pytest

from agent_mesh.discovery import (
    DiscoveryEngine,
    ResourceRequirement,
    tokenize,
)
from agent_mesh.registry import AgentDescriptor, ResourceGrant


def make_agent(name, description="", capabilities=None, resources=None):
    """Build an AgentDescriptor for ranking tests."""
    return AgentDescriptor(
        name=name,
        description=description,
        capabilities=capabilities or [],
        resources=[ResourceGrant(**r) for r in resources or []],
        endpoint=f"http://{name}:4000/task",
    )


@pytest.fixture
def engine():
    return DiscoveryEngine()


@pytest.fixture
def capability_agents():
    """Agents distinguished only by capabilities."""
    return [
        make_agent("search-agent", "Web search and indexing", ["search", "index"]),
        make_agent("code-agent", "Code generation and review", ["code", "review"]),
        make_agent("data-agent", "Data analysis and search", ["data", "search"]),
    ]


@pytest.fixture
def resource_agents():
    """Agents with overlapping capabilities but different resource grants."""
    return [
        make_agent(
            "dev-vm1",
            "Code review and debugging",
            ["code-review", "debugging"],
            [
                {"uri": "/home/amit/projects/*", "type": "filesystem"},
                {"uri": "agentkitai/agentlens", "type": "git"},
            ],
        ),
        make_agent(
            "dev-vm2",
            "Code review and testing",
            ["code-review", "testing"],
            [
                {"uri": "/opt/company/services/*", "type": "filesystem"},
                {"uri": "company/backend", "type": "git"},
            ],
        ),
        make_agent(
            "ops-agent",
            "DevOps and deployment",
            ["devops", "deployment"],
            [
                {"uri": "https://api.aws.amazon.com", "type": "api"},
                {"uri": "kubernetes-cluster-prod", "type": "service"},
            ],
        ),
    ]


def test_tokenize_lowercases_and_splits():
    """Test that tokenize splits on whitespace and punctuation."""
    assert tokenize("Web-Search,  INDEXING!") == ["web", "search", "indexing"]


def test_tokenize_drops_empty_tokens():
    """Test that separators alone produce no tokens."""
    assert tokenize("  ...  ") == []


def test_empty_query_returns_empty(engine, capability_agents):
    """Test that a query without tokens yields no results."""
    assert engine.discover("", capability_agents) == []
    assert engine.discover("  !? ", capability_agents) == []


def test_finds_agents_matching_query_tokens(engine, capability_agents):
    """Test that every agent containing the token is returned."""
    results = engine.discover("search", capability_agents)

    assert [r.agent.name for r in results] == ["search-agent", "data-agent"]
    assert all(r.score > 0 for r in results)


def test_ranks_by_match_ratio(engine, capability_agents):
    """Test that the agent matching the most tokens ranks first."""
    results = engine.discover("web search indexing", capability_agents)

    assert results[0].agent.name == "search-agent"
    assert results[0].matched_capabilities == ["web", "search", "indexing"]
    assert results[0].score == pytest.approx(1.0)
    assert results[1].agent.name == "data-agent"
    assert results[1].score == pytest.approx(1 / 3)


def test_ranks_capability_tags_without_description():
    """Test ranking when agents advertise only capability tags."""
    engine = DiscoveryEngine()
    agents = [
        make_agent("a", capabilities=["code", "review"]),
        make_agent("b", capabilities=["search", "index"]),
        make_agent("c", capabilities=["data", "search"]),
    ]

    results = engine.discover("web search index", agents)

    assert [r.agent.name for r in results] == ["b", "c"]
    assert results[0].score == pytest.approx(2 / 3)
    assert results[0].matched_capabilities == ["search", "index"]
    assert results[1].score == pytest.approx(1 / 3)


def test_substring_matching_tolerates_stemming(engine):
    """Test that tokens match as substrings of the agent text."""
    agents = [make_agent("indexer", capabilities=["indexing"])]

    results = engine.discover("index", agents)

    assert len(results) == 1
    assert results[0].matched_capabilities == ["index"]


def test_no_matches_returns_empty(engine, capability_agents):
    """Test that a query matching no agent yields an empty list."""
    assert engine.discover("quantum physics", capability_agents) == []


def test_respects_limit(engine, capability_agents):
    """Test that results are truncated to the limit."""
    results = engine.discover("search", capability_agents, limit=1)

    assert len(results) == 1
    assert results[0].agent.name == "search-agent"


def test_ties_preserve_candidate_order(engine):
    """Test that equally scored agents keep their input order."""
    agents = [
        make_agent("zeta", capabilities=["search"]),
        make_agent("alpha", capabilities=["search"]),
        make_agent("mid", capabilities=["search"]),
    ]

    results = engine.discover("search", agents)

    assert [r.agent.name for r in results] == ["zeta", "alpha", "mid"]


def test_scores_stay_within_unit_interval(engine, capability_agents):
    """Test that every score lies in [0, 1]."""
    for query in ["search", "web search indexing", "code review data"]:
        for result in engine.discover(query, capability_agents):
            assert 0.0 <= result.score <= 1.0


def test_filters_by_required_filesystem_resource(engine, resource_agents):
    """Test that only agents covering the resource are returned."""
    results = engine.discover(
        "code review",
        resource_agents,
        required_resources=[ResourceRequirement(uri="/home/amit/projects/agentlens")],
    )

    assert len(results) == 1
    assert results[0].agent.name == "dev-vm1"


def test_no_agent_has_required_resource(engine, resource_agents):
    """Test that an uncovered requirement yields no results."""
    results = engine.discover(
        "code review",
        resource_agents,
        required_resources=[ResourceRequirement(uri="/srv/unknown/path")],
    )

    assert results == []


def test_matches_glob_resource(engine, resource_agents):
    """Test that a glob grant satisfies a requirement beneath it."""
    results = engine.discover(
        "code review",
        resource_agents,
        required_resources=[ResourceRequirement(uri="/opt/company/services/auth")],
    )

    assert [r.agent.name for r in results] == ["dev-vm2"]


def test_matches_git_and_api_resources(engine, resource_agents):
    """Test that repo slugs and API URLs are matched."""
    git = engine.discover(
        "code review",
        resource_agents,
        required_resources=[ResourceRequirement(uri="agentkitai/agentlens", type="git")],
    )
    api = engine.discover(
        "devops deployment",
        resource_agents,
        required_resources=[ResourceRequirement(uri="https://api.aws.amazon.com/ec2")],
    )

    assert [r.agent.name for r in git] == ["dev-vm1"]
    assert [r.agent.name for r in api] == ["ops-agent"]


def test_requires_all_resources(engine, resource_agents):
    """Test that missing any one requirement excludes the agent."""
    results = engine.discover(
        "code review",
        resource_agents,
        required_resources=[
            ResourceRequirement(uri="/home/amit/projects/agentlens"),
            ResourceRequirement(uri="https://api.aws.amazon.com"),
        ],
    )

    assert results == []


def test_records_matched_resources(engine, resource_agents):
    """Test that the satisfying grants are reported per requirement."""
    results = engine.discover(
        "code review",
        resource_agents,
        required_resources=[
            ResourceRequirement(uri="/home/amit/projects/agentlens"),
            ResourceRequirement(uri="agentkitai/agentlens"),
        ],
    )

    matched = results[0].matched_resources
    assert [r.uri for r in matched] == ["/home/amit/projects/*", "agentkitai/agentlens"]
    assert matched[0].type == "filesystem"


def test_without_requirements_returns_all_capability_matches(engine, resource_agents):
    """Test that resources are ignored when no requirements are given."""
    results = engine.discover("code review", resource_agents)

    assert [r.agent.name for r in results] == ["dev-vm1", "dev-vm2"]
    assert all(r.matched_resources == [] for r in results)


def test_resource_boost_is_clamped(engine, resource_agents):
    """Test that a full capability match plus the boost stays at 1.0."""
    results = engine.discover(
        "code review",
        resource_agents,
        required_resources=[ResourceRequirement(uri="/home/amit/projects/agentlens")],
    )

    assert results[0].score == 1.0


def test_resource_boost_raises_partial_score(engine, resource_agents):
    """Test that the boost is added to a partial capability score."""
    results = engine.discover(
        "code review security",
        resource_agents,
        required_resources=[ResourceRequirement(uri="/home/amit/projects/agentlens")],
    )

    assert results[0].score == pytest.approx(2 / 3 + 0.2)


def test_resource_boost_is_configurable(resource_agents):
    """Test that the boost constant can be changed."""
    engine = DiscoveryEngine(resource_boost=0.05)

    results = engine.discover(
        "code review security",
        resource_agents,
        required_resources=[ResourceRequirement(uri="/home/amit/projects/agentlens")],
    )

    assert results[0].score == pytest.approx(2 / 3 + 0.05)


def test_host_sensitive_resource_filter(engine):
    """Test that grants on one host do not satisfy requirements on another."""
    agents = [
        make_agent(
            "vm1-agent",
            capabilities=["build"],
            resources=[{"uri": "file://vm1/home/amit/projects/*"}],
        ),
        make_agent(
            "vm2-agent",
            capabilities=["build"],
            resources=[{"uri": "file://vm2/home/amit/projects/*"}],
        ),
    ]

    vm1 = engine.discover(
        "build",
        agents,
        required_resources=[ResourceRequirement(uri="file://vm1/home/amit/projects/app")],
    )
    vm2 = engine.discover(
        "build",
        agents,
        required_resources=[ResourceRequirement(uri="file://vm2/home/amit/projects/app")],
    )

    assert [r.agent.name for r in vm1] == ["vm1-agent"]
    assert [r.agent.name for r in vm2] == ["vm2-agent"]


def test_malformed_requirement_does_not_raise(engine):
    """Test that an unparseable requirement URI degrades to string matching."""
    agents = [
        make_agent("ipv6", capabilities=["proxy"], resources=[{"uri": "http://[::1/api"}])
    ]

    results = engine.discover(
        "proxy",
        agents,
        required_resources=[ResourceRequirement(uri="http://[::1/api/v2")],
    )

    assert [r.agent.name for r in results] == ["ipv6"]
