"""BDD step definitions for tag filtering features."""

from dataclasses import dataclass, field
from datetime import datetime

import pytest
from pytest_bdd import given, parsers, then, when
from tests.fakes import NOW, T, FakeCloudWatch, FakeTagging

from cwmetrics.core.collector import CloudWatchCollector
from cwmetrics.core.config import CollectorConfig
from cwmetrics.core.models import (
    AccountContext,
    Dimension,
    Event,
    Label,
    Metric,
    ResourceTags,
    Tag,
)

REGION = "us-east-1"


@dataclass
class TagScenarioContext:
    """Mutable state shared by the steps of one scenario."""

    namespace: str = ""
    resource_type: str = ""
    tags_filter: list[dict[str, str]] = field(default_factory=list)
    catalog: list[Metric] = field(default_factory=list)
    series: dict[str, list[tuple[datetime, float]]] = field(default_factory=dict)
    resource_tags: ResourceTags = field(default_factory=dict)
    failing_types: list[str] = field(default_factory=list)
    events: list[Event] = field(default_factory=list)

    def add_metric(self, metric: Metric, value: float) -> None:
        self.catalog.append(metric)
        self.series[Label.for_metric(metric, "Average").encode()] = [(T, value)]

    def event_for(self, identity: str) -> Event | None:
        return next((e for e in self.events if e.identity == identity), None)


@pytest.fixture
def ctx() -> TagScenarioContext:
    """Fresh scenario context for each test."""
    return TagScenarioContext()


@given(
    parsers.parse(
        'namespace "{namespace}" is collected for resource type "{resource_type}"'
    )
)
def step_namespace(ctx: TagScenarioContext, namespace: str, resource_type: str) -> None:
    ctx.namespace = namespace
    ctx.resource_type = resource_type


@given(
    parsers.parse(
        'instance "{instance}" tagged {key}="{value}" reports {metric} {reading:g}'
    )
)
def step_instance(
    ctx: TagScenarioContext,
    instance: str,
    key: str,
    value: str,
    metric: str,
    reading: float,
) -> None:
    ctx.add_metric(
        Metric(ctx.namespace, metric, (Dimension("InstanceId", instance),)), reading
    )
    ctx.resource_tags[instance] = (Tag(key, value),)


@given(parsers.parse("the namespace reports an aggregate {metric} {reading:g}"))
def step_aggregate(ctx: TagScenarioContext, metric: str, reading: float) -> None:
    ctx.add_metric(Metric(ctx.namespace, metric), reading)


@given(parsers.parse('a tags filter {key}="{value}"'))
def step_tags_filter(ctx: TagScenarioContext, key: str, value: str) -> None:
    ctx.tags_filter.append({"key": key, "value": value})


@given(parsers.parse('tag lookup for "{resource_type}" fails'))
def step_tag_lookup_fails(ctx: TagScenarioContext, resource_type: str) -> None:
    ctx.failing_types.append(resource_type)


@when("the collector runs")
def step_collect(ctx: TagScenarioContext) -> None:
    config = CollectorConfig.from_dict(
        {
            "regions": [REGION],
            "tags_filter": ctx.tags_filter,
            "metrics": [
                {
                    "namespace": ctx.namespace,
                    "resource_type": ctx.resource_type,
                    "statistic": ["Average"],
                }
            ],
        }
    )
    cloudwatch = FakeCloudWatch(catalog={ctx.namespace: ctx.catalog}, series=ctx.series)
    collector = CloudWatchCollector(
        config=config,
        account=AccountContext("111", "test-account"),
        catalog=cloudwatch,
        metric_data=cloudwatch,
        tagging=FakeTagging(
            {ctx.resource_type: ctx.resource_tags}, failing_types=ctx.failing_types
        ),
    )
    ctx.events = collector.collect(NOW)


@then(parsers.re(r"(?P<count>\d+) events? (?:is|are) reported"))
def step_event_count(ctx: TagScenarioContext, count: str) -> None:
    assert len(ctx.events) == int(count)


@then(parsers.parse('an event is reported for "{identity}"'))
def step_event_reported(ctx: TagScenarioContext, identity: str) -> None:
    assert ctx.event_for(identity) is not None


@then(parsers.parse('no event is reported for "{identity}"'))
def step_no_event(ctx: TagScenarioContext, identity: str) -> None:
    assert ctx.event_for(identity) is None


@then(parsers.parse('event "{identity}" has tag {key}="{value}"'))
def step_event_tag(ctx: TagScenarioContext, identity: str, key: str, value: str) -> None:
    event = ctx.event_for(identity)
    assert event is not None
    assert event.tags == {key: value}


@then(parsers.parse('event "{identity}" has no tags'))
def step_event_untagged(ctx: TagScenarioContext, identity: str) -> None:
    event = ctx.event_for(identity)
    assert event is not None
    assert event.tags == {}
