"""GitHub operations that need more than one gh call, plus result encoders"""

import base64
import json
import logging
from typing import Any, Callable, List, Optional, Tuple

from mcp.types import TextContent

from ..error_handling import ExternalToolError, MalformedOutput
from .cli import EMPTY_ARRAY, GhGateway
from .models import CreateBranch, CreateTag, SetBranchProtection

logger = logging.getLogger(__name__)

PROTECTION_DEGRADED = (
    "Branch protection update attempted. Note: Full protection settings may "
    "require direct API access. Error details: {error}"
)

# Errors from gh itself; credential and installation errors are never caught here
GH_FAILURES = (ExternalToolError, MalformedOutput)


# Encoders


def text_content(text: str) -> List[TextContent]:
    return [TextContent(type="text", text=text)]


def json_content(value: Any) -> List[TextContent]:
    return text_content(json.dumps(value, indent=2))


def encode_json(params, value: Any) -> List[TextContent]:
    return json_content(value)


def encode_text(params, value: str) -> List[TextContent]:
    return text_content(value)


def confirm(template: str) -> Callable[[Any, Any], List[TextContent]]:
    """Encoder that ignores gh output and names the affected entity.

    ``template`` is formatted with the parameter model's fields.
    """

    def encode(params, value: Any) -> List[TextContent]:
        return text_content(template.format(**params.model_dump()))

    return encode


def porcelain(template: str) -> Callable[[Any, Any], List[TextContent]]:
    """Encoder for gh commands that print a URL or short message.

    Falls back to a confirmation when gh printed nothing.
    """
    fallback = confirm(template)

    def encode(params, value: Any) -> List[TextContent]:
        text = (value or "").strip()
        if not text:
            return fallback(params, value)
        return text_content(text)

    return encode


def encode_json_or_confirm(template: str) -> Callable[[Any, Any], List[TextContent]]:
    fallback = confirm(template)

    def encode(params, value: Any) -> List[TextContent]:
        if value is None:
            return fallback(params, value)
        return json_content(value)

    return encode


def decode_file_content(value: Any) -> Any:
    """Return the decoded text of a contents API response.

    Anything that is not a base64 encoded UTF-8 file comes back unchanged.
    That covers directories, binary files and files over 1 MB, which GitHub
    serves with ``encoding: none`` and an empty ``content``.
    """
    if not isinstance(value, dict) or value.get("encoding") != "base64":
        return value
    content = value.get("content")
    if not isinstance(content, str):
        return value

    cleaned = content.replace("\n", "").replace("\r", "")
    try:
        return base64.b64decode(cleaned, validate=True).decode("utf-8")
    except ValueError:
        return value


def encode_file(params, value: Any) -> List[TextContent]:
    decoded = decode_file_content(value)
    if isinstance(decoded, str):
        return text_content(decoded)
    return json_content(decoded)


# Composite operations


async def resolve_commit(
    gateway: GhGateway, account: Optional[str], full_name: str, ref: str
) -> str:
    """Resolve a branch name to its head commit.

    Falls back to ``ref`` itself, so a commit SHA is accepted in place of a
    branch name.
    """
    try:
        data = await gateway.api(account, f"repos/{full_name}/git/ref/heads/{ref}")
    except GH_FAILURES as e:
        logger.debug(f"Could not resolve {ref} as a branch of {full_name}: {e}")
        return ref

    sha = data.get("object", {}).get("sha") if isinstance(data, dict) else None
    if isinstance(sha, str) and sha:
        return sha
    return ref


async def default_branch(
    gateway: GhGateway, account: Optional[str], full_name: str
) -> str:
    try:
        data = await gateway.api(account, f"repos/{full_name}")
    except GH_FAILURES as e:
        logger.debug(f"Could not look up default branch of {full_name}: {e}")
        return "HEAD"

    branch = data.get("default_branch") if isinstance(data, dict) else None
    return branch if isinstance(branch, str) and branch else "HEAD"


async def create_branch(gateway: GhGateway, params: CreateBranch) -> List[TextContent]:
    sha = await resolve_commit(
        gateway, params.account, params.full_name, params.from_ or "HEAD"
    )
    result = await gateway.api(
        params.account,
        f"repos/{params.full_name}/git/refs",
        method="POST",
        fields=[("ref", f"refs/heads/{params.branch}"), ("sha", sha)],
    )
    return json_content(result)


async def create_tag(gateway: GhGateway, params: CreateTag) -> List[TextContent]:
    ref = params.sha
    if ref is None:
        ref = await default_branch(gateway, params.account, params.full_name)
    sha = await resolve_commit(gateway, params.account, params.full_name, ref)

    if params.message is not None:
        tag_object = await gateway.api(
            params.account,
            f"repos/{params.full_name}/git/tags",
            method="POST",
            fields=[
                ("tag", params.tag),
                ("message", params.message),
                ("object", sha),
                ("type", "commit"),
            ],
        )
        if isinstance(tag_object, dict) and isinstance(tag_object.get("sha"), str):
            sha = tag_object["sha"]

    result = await gateway.api(
        params.account,
        f"repos/{params.full_name}/git/refs",
        method="POST",
        fields=[("ref", f"refs/tags/{params.tag}"), ("sha", sha)],
    )
    return json_content(result)


def protection_fields(params: SetBranchProtection) -> Tuple[list, list]:
    """Raw ``-f`` and typed ``-F`` fields for the branch protection PUT body.

    Status check names always go out as raw strings, so ``@file`` and
    ``42`` reach GitHub verbatim. The API requires all four top-level sections, so absent ones
    are sent as null. Push restrictions are always cleared.
    """
    contexts = []
    fields = []

    checks = params.required_status_checks
    if checks is None:
        fields.append(("required_status_checks", None))
    else:
        fields.append(("required_status_checks[strict]", bool(checks.strict)))
        if checks.contexts:
            for context in checks.contexts:
                contexts.append(("required_status_checks[contexts][]", context))
        else:
            fields.append(("required_status_checks[contexts]", EMPTY_ARRAY))

    fields.append(("enforce_admins", params.enforce_admins))

    reviews = params.required_pull_request_reviews
    if reviews is None:
        fields.append(("required_pull_request_reviews", None))
    else:
        fields.append(
            (
                "required_pull_request_reviews[dismiss_stale_reviews]",
                bool(reviews.dismiss_stale_reviews),
            )
        )
        fields.append(
            (
                "required_pull_request_reviews[require_code_owner_reviews]",
                bool(reviews.require_code_owner_reviews),
            )
        )
        if reviews.required_approving_review_count is not None:
            fields.append(
                (
                    "required_pull_request_reviews[required_approving_review_count]",
                    reviews.required_approving_review_count,
                )
            )

    fields.append(("restrictions", None))

    for name in ("required_linear_history", "allow_force_pushes", "allow_deletions"):
        value = getattr(params, name)
        if value is not None:
            fields.append((name, value))

    return contexts, fields


async def set_branch_protection(
    gateway: GhGateway, params: SetBranchProtection
) -> List[TextContent]:
    endpoint = f"repos/{params.full_name}/branches/{params.branch}/protection"
    contexts, typed_fields = protection_fields(params)
    try:
        result = await gateway.api(
            params.account,
            endpoint,
            method="PUT",
            fields=contexts,
            typed_fields=typed_fields,
            headers=["Accept: application/vnd.github+json"],
        )
        if params.required_signatures is not None:
            await gateway.api(
                params.account,
                f"{endpoint}/required_signatures",
                method="POST" if params.required_signatures else "DELETE",
            )
    except GH_FAILURES as e:
        logger.warning(f"Branch protection update for {params.branch} failed: {e}")
        return text_content(PROTECTION_DEGRADED.format(error=e))

    return json_content(result)
