"""Default document types for a project-management vault.

These are ordinary registrations; nothing else in the package depends on
them.  Call :func:`load_default_schemas` on a fresh registry to get the
standard set, or register your own types instead.
"""

from __future__ import annotations

from vaultlint.registry import SchemaRegistry
from vaultlint.schema import Field, SchemaModel, array, date, enum, literal, string

REFERENCE_FIELDS = ("projects",)

_TAIL_ORDER = ("projects", "tags", "created", "updated", "summarisedAt", "summary")


def _base_fields() -> list[Field]:
    return [
        array("projects", default=[], description="Parent project IDs this document belongs to"),
        array("tags", default=[], description="Freeform classification tags"),
        date("created", optional=True, description="ISO date when document was created"),
        date("updated", optional=True, description="ISO date of last update"),
        date("summarisedAt", optional=True, description="ISO date the summary was last written"),
        string("summary", optional=True, description="Short generated summary of the body"),
    ]


def _model(type_name: str, description: str, *fields: Field) -> SchemaModel:
    head = [
        literal("type", type_name, description="Document type discriminator"),
        string("id", min_length=1, description=f"Unique {type_name} identifier"),
        string("title", min_length=1, description="Human-readable title"),
    ]
    return SchemaModel(type_name, [*head, *fields, *_base_fields()], description=description)


def _order(*middle: str) -> list[str]:
    return ["type", "id", "title", *middle, *_TAIL_ORDER]


def load_default_schemas(registry: SchemaRegistry) -> SchemaRegistry:
    """Register the built-in document types on *registry* and return it."""
    definitions: list[tuple[SchemaModel, list[str]]] = [
        (
            _model(
                "project",
                "A body of work that other documents belong to",
                enum("status", ["active", "paused", "completed", "archived"], description="Lifecycle state"),
                array("platforms", optional=True, description="Target platforms"),
                string("ios_repo", optional=True),
                string("web_repo", optional=True),
            ),
            _order("status", "platforms", "ios_repo", "web_repo"),
        ),
        (
            _model(
                "decision",
                "A recorded decision and its outcome",
                enum(
                    "status",
                    ["proposed", "accepted", "superseded", "rejected"],
                    default="accepted",
                    description="Decision state",
                ),
                date("decisionDate", optional=True, description="ISO date the decision was taken"),
                string("outcome", optional=True, description="What was decided"),
            ),
            _order("status", "outcome", "decisionDate"),
        ),
        (
            _model(
                "idea",
                "A captured idea; may evolve into a decision or project",
                enum("status", ["draft", "proposed", "accepted", "rejected", "deferred"]),
            ),
            _order("status"),
        ),
        (
            _model(
                "brainstorm",
                "A raw captured thought",
                enum("status", ["draft", "proposed", "accepted", "rejected", "deferred"]),
            ),
            _order("status"),
        ),
        (
            _model(
                "plan",
                "Implementation strategy for a feature or task",
                enum("status", ["draft", "approved", "done"], default="draft"),
            ),
            _order("status"),
        ),
        (
            _model(
                "task",
                "A unit of planned work",
                enum("status", ["todo", "in-progress", "done", "cancelled"]),
                enum("priority", ["low", "medium", "high", "critical"], optional=True),
                enum("kind", ["feature", "bug", "chore", "spike"], optional=True),
                string("agent", optional=True, description="Agent that worked on this task"),
                string("branch", optional=True, description="Git branch"),
                string("pr", optional=True, description="PR number or URL"),
            ),
            _order("status", "priority", "kind", "agent", "branch", "pr"),
        ),
        (
            _model(
                "bug",
                "A defect report with reproduction context",
                enum("status", ["open", "investigating", "fixed", "wontfix"]),
                enum("severity", ["low", "medium", "high", "critical"], optional=True),
                string("environment", optional=True),
                string("steps_to_reproduce", optional=True),
            ),
            _order("status", "severity", "environment", "steps_to_reproduce"),
        ),
        (
            _model(
                "spec",
                "A feature specification",
                enum("status", ["draft", "ready", "building", "shipped"]),
                string("scope", optional=True),
            ),
            _order("status", "scope"),
        ),
        (
            _model(
                "spike",
                "A time-boxed technical investigation",
                enum("status", ["open", "done", "abandoned"]),
                string("timebox", optional=True),
                string("findings", optional=True),
            ),
            _order("status", "timebox", "findings"),
        ),
        (
            _model(
                "release",
                "A version milestone",
                string("version", min_length=1),
                enum("status", ["planned", "in-progress", "shipped"]),
            ),
            _order("version", "status"),
        ),
        (
            _model(
                "documentation",
                "A written document belonging to a project",
                enum("status", ["draft", "review", "published", "deprecated"]),
            ),
            _order("status"),
        ),
    ]
    for model, key_order in definitions:
        registry.register(
            model.type_name,
            model,
            id_field="id",
            reference_fields=REFERENCE_FIELDS,
            key_order=key_order,
        )
    return registry
