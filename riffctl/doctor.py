"""Checks that the system is installed and the user can reach its resources."""

from __future__ import annotations

import json
import subprocess
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Iterable, Optional

from riffctl import config as _config
from riffctl.config import (
    CORE_RUNTIME,
    KNATIVE_RUNTIME,
    NAMESPACE_FLAG,
    STREAMING_RUNTIME,
    Config,
    FieldErrors,
    error_missing_field,
    format_table,
)

RIFF_SYSTEM_NAMESPACE = "riff-system"

VERBS = ("get", "list", "create", "update", "delete", "patch", "watch")
READ_VERBS = ("get", "list", "watch")


class AccessStatus(Enum):
    UNDEFINED = 0
    ALLOWED = 1
    DENIED = 2
    MIXED = 3
    MISSING = 4
    UNKNOWN = 5

    def combine(self, other: "AccessStatus") -> "AccessStatus":
        """Merge the status of another verb into this one."""
        if self is AccessStatus.UNDEFINED:
            return other
        if self is AccessStatus.UNKNOWN or other is AccessStatus.UNKNOWN:
            return AccessStatus.UNKNOWN
        if self is not other:
            return AccessStatus.MIXED
        if self is AccessStatus.ALLOWED:
            return AccessStatus.ALLOWED
        return AccessStatus.DENIED

    def label(self) -> str:
        if self is AccessStatus.ALLOWED:
            return _config.success_text("allowed")
        if self is AccessStatus.MIXED:
            return _config.warn_text("mixed")
        if self is AccessStatus.DENIED:
            return _config.warn_text("denied")
        if self is AccessStatus.MISSING:
            return _config.error_text("missing")
        if self is AccessStatus.UNKNOWN:
            return _config.error_text("unknown")
        return "n/a"


@dataclass(frozen=True)
class ResourceAttributes:
    namespace: str
    group: str
    resource: str
    name: str = ""
    subresource: str = ""
    verb: str = ""


@dataclass(frozen=True)
class AccessReview:
    allowed: bool = False
    denied: bool = False
    evaluation_error: str = ""


class NotFoundError(LookupError):
    """Raised when a requested cluster resource does not exist."""


@dataclass
class AccessCheck:
    attributes: ResourceAttributes
    verbs: tuple
    read_status: AccessStatus = AccessStatus.UNDEFINED
    write_status: AccessStatus = AccessStatus.UNDEFINED

    def resolve_status(self, client: Any) -> None:
        """Ask the cluster about every verb and record the read and write status."""
        attrs = self.attributes
        if "." in attrs.group:
            try:
                client.get_custom_resource_definition(f"{attrs.resource}.{attrs.group}")
            except NotFoundError:
                self.read_status = AccessStatus.MISSING
                self.write_status = AccessStatus.MISSING
                return
        for verb in self.verbs:
            review = client.create_access_review(replace(attrs, verb=verb))
            if review.evaluation_error:
                raise RuntimeError(review.evaluation_error)
            if review.allowed:
                status = AccessStatus.ALLOWED
            elif review.denied:
                status = AccessStatus.DENIED
            else:
                status = AccessStatus.UNKNOWN
            if verb in READ_VERBS:
                self.read_status = self.read_status.combine(status)
            else:
                self.write_status = self.write_status.combine(status)

    def resource_label(self) -> str:
        attrs = self.attributes
        label = attrs.resource
        if attrs.group != "core":
            label = f"{label}.{attrs.group}"
        if attrs.subresource:
            label = f"{label}/{attrs.subresource}"
        return label


def access_checks(namespace: str, runtimes: Iterable[str]) -> list[AccessCheck]:
    """The access checks for a namespace and the enabled runtimes."""
    runtimes = set(runtimes)

    def check(group: str, resource: str, verbs=VERBS, **extra) -> AccessCheck:
        attrs = ResourceAttributes(namespace=extra.pop("ns", namespace), group=group, resource=resource, **extra)
        return AccessCheck(attributes=attrs, verbs=tuple(verbs))

    checks = [
        check("core", "configmaps", READ_VERBS, ns=RIFF_SYSTEM_NAMESPACE, name="builders"),
        check("core", "configmaps"),
        check("core", "secrets"),
        check("core", "pods", READ_VERBS),
        check("core", "pods", READ_VERBS, subresource="log"),
        check("build.projectriff.io", "applications"),
        check("build.projectriff.io", "containers"),
        check("build.projectriff.io", "functions"),
    ]
    if CORE_RUNTIME in runtimes:
        checks.append(check("core.projectriff.io", "deployers"))
    if STREAMING_RUNTIME in runtimes:
        checks.extend([
            check("streaming.projectriff.io", "processors"),
            check("streaming.projectriff.io", "streams"),
            check("streaming.projectriff.io", "kafkaproviders"),
        ])
    if KNATIVE_RUNTIME in runtimes:
        checks.extend([
            check("knative.projectriff.io", "adapters"),
            check("knative.projectriff.io", "deployers"),
        ])
    return checks


def is_healthy(checks: Iterable[AccessCheck]) -> bool:
    good = (AccessStatus.ALLOWED, AccessStatus.UNDEFINED)
    return all(c.read_status in good and c.write_status in good for c in checks)


class KubectlClient:
    """Cluster access through the kubectl command."""

    def __init__(
        self,
        kubeconfig: Optional[str] = None,
        kubectl: str = "kubectl",
        run: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    ) -> None:
        self.kubeconfig = kubeconfig
        self.kubectl = kubectl
        self._run = run

    def _call(self, *args: str, stdin: Optional[str] = None) -> dict:
        cmd = [self.kubectl]
        if self.kubeconfig:
            cmd += ["--kubeconfig", self.kubeconfig]
        cmd += [*args, "-o", "json"]
        result = self._run(cmd, input=stdin, capture_output=True, text=True, check=False)
        if result.returncode != 0:
            message = (result.stderr or "").strip()
            if "(NotFound)" in message:
                raise NotFoundError(message)
            raise RuntimeError(message or f"{self.kubectl} exited with status {result.returncode}")
        output = (result.stdout or "").strip()
        return json.loads(output) if output else {}

    def get_namespace(self, name: str) -> dict:
        return self._call("get", "namespace", name)

    def get_custom_resource_definition(self, name: str) -> dict:
        return self._call("get", "customresourcedefinitions.apiextensions.k8s.io", name)

    def create_access_review(self, attributes: ResourceAttributes) -> AccessReview:
        resource_attributes = {
            key: value
            for key, value in (
                ("namespace", attributes.namespace),
                ("group", attributes.group),
                ("resource", attributes.resource),
                ("name", attributes.name),
                ("subresource", attributes.subresource),
                ("verb", attributes.verb),
            )
            if value
        }
        body = {
            "apiVersion": "authorization.k8s.io/v1",
            "kind": "SelfSubjectAccessReview",
            "spec": {"resourceAttributes": resource_attributes},
        }
        status = self._call("create", "-f", "-", stdin=json.dumps(body)).get("status", {})
        return AccessReview(
            allowed=bool(status.get("allowed", False)),
            denied=bool(status.get("denied", False)),
            evaluation_error=status.get("evaluationError", ""),
        )


@dataclass
class DoctorOptions:
    namespace: str = ""

    def validate(self) -> FieldErrors:
        errors = FieldErrors()
        if not self.namespace:
            errors = errors.also(error_missing_field(NAMESPACE_FLAG))
        return errors

    def exec(self, config: Config) -> None:
        client = config.client
        if client is None:
            client = KubectlClient(config.kube_config_file or None)
        self._check_namespaces(config, client, [self.namespace, RIFF_SYSTEM_NAMESPACE])
        self._check_access(config, client, access_checks(self.namespace, config.runtimes))

    @staticmethod
    def _check_namespaces(config: Config, client: Any, namespaces: list[str]) -> None:
        rows = [["NAMESPACE", "STATUS"]]
        try:
            for namespace in namespaces:
                try:
                    client.get_namespace(namespace)
                    status = _config.success_text("ok")
                except NotFoundError:
                    status = _config.error_text("missing")
                rows.append([namespace, status])
        finally:
            config.stdout.write(format_table(rows))

    @staticmethod
    def _check_access(config: Config, client: Any, checks: list[AccessCheck]) -> None:
        for check in checks:
            check.resolve_status(client)
        config.stdout.write("\n")
        rows = [["RESOURCE", "NAMESPACE", "NAME", "READ", "WRITE"]]
        rows.extend(
            [
                check.resource_label(),
                check.attributes.namespace,
                check.attributes.name or "*",
                check.read_status.label(),
                check.write_status.label(),
            ]
            for check in checks
        )
        config.stdout.write(format_table(rows))