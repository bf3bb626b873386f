"""Renderer for a CycloneDX BOM carrying the dependency graph."""

from cyclonedx.model import Property
from cyclonedx.model.bom import Bom
from cyclonedx.model.component import Component, ComponentType
from packageurl import PackageURL

from ..._extraction.models import Manifest, PackageIdentifier
from ...serialization import DEFAULT_CYCLONEDX_VERSION, entry_to_dict, serialize_cyclonedx_bom
from ..protocol import RenderContext

PROPERTY_RELATIONSHIP = "depgraph:relationship"
PROPERTY_REPOSITORY = "depgraph:repository"


class CycloneDxRenderer:
    """Writes bom.cdx.json: one library component per manifest entry plus the dependency graph."""

    name = "cyclonedx"
    file_name = "bom.cdx.json"

    def __init__(self, spec_version: str = DEFAULT_CYCLONEDX_VERSION) -> None:
        self.spec_version = spec_version

    def build_bom(self, manifest: Manifest) -> Bom:
        bom = Bom()
        components: dict[PackageIdentifier, Component] = {}

        for key in sorted(manifest, key=lambda k: k.purl):
            entry = manifest[key]
            # Validates the entry before anything is added to the BOM
            rendered = entry_to_dict(key, entry)

            properties = [Property(name=PROPERTY_RELATIONSHIP, value=rendered["relationship"])]
            repository = (rendered.get("metadata") or {}).get("repository")
            if repository:
                properties.append(Property(name=PROPERTY_REPOSITORY, value=repository["name"]))

            component = Component(
                type=ComponentType.LIBRARY,
                group=key.group or None,
                name=key.name,
                version=key.version,
                purl=PackageURL.from_string(key.purl),
                bom_ref=key.purl,
                properties=properties,
            )
            bom.components.add(component)
            components[key] = component

        for key, component in components.items():
            depends_on = [components[d] for d in manifest[key].sorted_dependencies() if d in components]
            bom.register_dependency(component, depends_on)

        return bom

    def render(self, manifest: Manifest, context: RenderContext) -> dict[str, bytes]:
        bom = self.build_bom(manifest)
        return {self.file_name: serialize_cyclonedx_bom(bom, self.spec_version).encode("utf-8")}
