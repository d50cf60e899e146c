"""
Services - Builder Service

Editing session over one project: the current page, the selected
component and the drag state. All tree changes go through
``builder_server.core.tree``; this layer swaps the results into the page
and keeps the selection pointing at live nodes.
"""

import logging
from functools import lru_cache
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import ValidationError

from builder_server.config import get_settings
from builder_server.core import tree
from builder_server.core.dragdrop import (
    AppendIntent,
    DragDropResolver,
    DropIntent,
    InsertIntent,
    RelocateIntent,
    apply_intent,
)
from builder_server.core.registry import IdFactory, create_component, new_id
from builder_server.core.templates import build_template
from builder_server.schemas.component import ComponentNode, ComponentPatch, ComponentType
from builder_server.schemas.drag import CanvasTarget, ContainerTarget, NodeSource, PaletteSource, RootSentinel
from builder_server.schemas.page import Page, PageType, Project, slugify, utc_now
from builder_server.services.storage_service import StorageService

logger = logging.getLogger(__name__)


def demo_project(name: str = "My Website", id_factory: IdFactory = new_id) -> Project:
    """Starter project: a Home page with a hero, plus empty About and News pages."""
    hero = ComponentNode(
        id=id_factory(),
        type=ComponentType.HERO,
        props={"content": "Welcome to Our Company"},
        styles={
            "backgroundColor": "#1a1a2e",
            "textColor": "#ffffff",
            "padding": "80px",
            "textAlign": "center",
        },
        children=[
            ComponentNode(
                id=id_factory(),
                type=ComponentType.HEADING,
                props={"content": "Build Something Amazing", "level": 1},
                styles={
                    "fontSize": "48px",
                    "fontWeight": "700",
                    "textColor": "#ffffff",
                    "margin": "0 0 16px 0",
                },
            ),
            ComponentNode(
                id=id_factory(),
                type=ComponentType.PARAGRAPH,
                props={
                    "content": "Create stunning websites with our drag and drop builder. No coding required.",
                },
                styles={"fontSize": "18px", "textColor": "#a0a0a0", "margin": "0 0 32px 0"},
            ),
            ComponentNode(
                id=id_factory(),
                type=ComponentType.BUTTON,
                props={"content": "Get Started", "variant": "primary"},
                styles={"padding": "12px 32px", "borderRadius": "8px"},
            ),
        ],
    )
    return Project(
        id=id_factory(),
        name=name,
        pages=[
            Page(id=id_factory(), name="Home", slug="home", type=PageType.LANDING, components=[hero]),
            Page(id=id_factory(), name="About", slug="about", type=PageType.ABOUT),
            Page(id=id_factory(), name="News", slug="news", type=PageType.NEWS),
        ],
    )


class BuilderService:
    """Project/page/selection state plus component operations."""

    STORAGE_KEY = "builder-project"

    def __init__(
        self,
        settings=None,
        storage: Optional[StorageService] = None,
        id_factory: IdFactory = new_id,
    ):
        self.settings = settings or get_settings()
        self.storage = storage or StorageService(self.settings)
        self.id_factory = id_factory

        self.project: Optional[Project] = None
        self.current_page: Optional[Page] = None
        self.selected_component: Optional[ComponentNode] = None
        self.hovered_component_id: Optional[str] = None
        self.is_preview_mode = False

        self.drag = DragDropResolver(
            cross_parent_moves=self.settings.builder.cross_parent_moves,
            id_factory=id_factory,
        )

    # --- Project ----------------------------------------------------------

    def load_project(self) -> Project:
        """Load the stored project, or start a new one."""
        stored = self.storage.load(self.STORAGE_KEY)
        project = None
        if stored:
            try:
                project = Project.model_validate(stored)
            except ValidationError as e:
                logger.error(f"Stored project is unreadable, starting fresh: {e}")

        if project is None:
            if self.settings.builder.seed_demo_project:
                project = demo_project(self.settings.builder.project_name, self.id_factory)
            else:
                project = Project(id=self.id_factory(), name=self.settings.builder.project_name)

        self.project = project
        self.current_page = project.pages[0] if project.pages else None
        self.selected_component = None
        logger.info(f"Loaded project {project.name} with {len(project.pages)} page(s)")
        return project

    def save_project(self) -> None:
        if self.project is None:
            return
        self.storage.save(
            self.STORAGE_KEY,
            self.project.model_dump(mode="json", by_alias=True, exclude_none=True),
        )

    def save_page(self) -> bool:
        """Persist the current page (with the rest of the project)."""
        if self.project is None or self.current_page is None:
            return False
        self.save_project()
        logger.info(f"Saved page {self.current_page.slug}")
        return True

    # --- Pages ------------------------------------------------------------

    def list_pages(self) -> List[Page]:
        return list(self.project.pages) if self.project else []

    def select_page(self, page_id: str) -> Optional[Page]:
        if self.project is None:
            return None
        page = self.project.get_page(page_id)
        if page is not None:
            self.current_page = page
            self.selected_component = None
        return page

    def create_page(self, name: str, page_type: Union[PageType, str] = PageType.CUSTOM) -> Optional[Page]:
        """Add a page to the project and make it current."""
        if self.project is None:
            return None
        page = Page(
            id=self.id_factory(),
            name=name,
            slug=slugify(name),
            type=PageType(page_type),
        )
        self.project = self.project.model_copy(update={
            "pages": self.project.pages + [page],
            "updated_at": utc_now(),
        })
        self.current_page = page
        self.selected_component = None
        self.save_project()
        return page

    def rename_page(self, page_id: str, name: str) -> Optional[Page]:
        if self.project is None:
            return None
        page = self.project.get_page(page_id)
        if page is None:
            return None
        renamed = page.model_copy(update={"name": name, "slug": slugify(name), "updated_at": utc_now()})
        self._replace_page(renamed)
        self.save_project()
        return renamed

    def delete_page(self, page_id: str) -> bool:
        if self.project is None or self.project.get_page(page_id) is None:
            return False
        self.project = self.project.model_copy(update={
            "pages": [p for p in self.project.pages if p.id != page_id],
            "updated_at": utc_now(),
        })
        if self.current_page is not None and self.current_page.id == page_id:
            self.current_page = None
            self.selected_component = None
        self.save_project()
        return True

    def _replace_page(self, page: Page) -> None:
        self.project = self.project.model_copy(update={
            "pages": [page if p.id == page.id else p for p in self.project.pages],
            "updated_at": utc_now(),
        })
        if self.current_page is not None and self.current_page.id == page.id:
            self.current_page = page

    # --- Components -------------------------------------------------------

    @property
    def components(self) -> List[ComponentNode]:
        return self.current_page.components if self.current_page else []

    def _commit(
        self,
        components: List[ComponentNode],
        select: Optional[ComponentNode] = None,
    ) -> bool:
        """
        Swap a new component list into the current page.

        Returns False (and changes nothing) when the tree engine handed back
        the same list, i.e. the operation was a no-op.
        """
        if self.current_page is None or components is self.current_page.components:
            return False

        page = self.current_page.model_copy(update={"components": components, "updated_at": utc_now()})
        self._replace_page(page)

        if select is not None:
            self.selected_component = select
        elif self.selected_component is not None:
            # Node instances change on every write; follow the id to the new one.
            self.selected_component = tree.find_node(components, self.selected_component.id)
        return True

    def select_component(self, node_id: Optional[str]) -> Optional[ComponentNode]:
        self.selected_component = tree.find_node(self.components, node_id) if node_id else None
        return self.selected_component

    def set_hovered_component(self, node_id: Optional[str]) -> None:
        self.hovered_component_id = node_id

    def set_preview_mode(self, enabled: bool) -> None:
        self.is_preview_mode = enabled

    def get_component(self, node_id: str) -> Optional[ComponentNode]:
        return tree.find_node(self.components, node_id)

    def insert_component(
        self,
        node: ComponentNode,
        index: Optional[int] = None,
        parent_id: Optional[str] = None,
    ) -> bool:
        """Insert an existing node instance and select it."""
        return self._commit(tree.insert_node(self.components, node, index, parent_id), select=node)

    def add_component(
        self,
        component_type: Union[ComponentType, str],
        index: Optional[int] = None,
        parent_id: Optional[str] = None,
    ) -> Optional[ComponentNode]:
        """
        Create a component and insert it.

        Args:
            component_type: Registered component type
            index: Position in the target list (append when omitted)
            parent_id: Container to insert into (root when omitted)

        Returns:
            The new node, or None if nothing was inserted
        """
        node = create_component(component_type, self.id_factory)
        if self.insert_component(node, index, parent_id):
            logger.debug(f"Added {node.type.value} {node.id}")
            return node
        return None

    def add_to_container(
        self,
        container_id: str,
        component_type: Union[ComponentType, str],
    ) -> Optional[ComponentNode]:
        node = create_component(component_type, self.id_factory)
        if self._commit(tree.add_to_container(self.components, container_id, node), select=node):
            return node
        return None

    def insert_template(
        self,
        template_id: str,
        index: Optional[int] = None,
        parent_id: Optional[str] = None,
    ) -> Optional[ComponentNode]:
        node = build_template(template_id, self.id_factory)
        if self.insert_component(node, index, parent_id):
            return node
        return None

    def update_component(
        self,
        node_id: str,
        patch: Union[ComponentPatch, Mapping[str, Any]],
    ) -> Optional[ComponentNode]:
        """Apply a props/styles patch; returns the new node instance."""
        if self._commit(tree.update_node(self.components, node_id, patch)):
            return tree.find_node(self.components, node_id)
        return None

    def update_props(self, node_id: str, values: Dict[str, Any]) -> Optional[ComponentNode]:
        """Merge ``values`` into the node's props."""
        node = self.get_component(node_id)
        if node is None:
            return None
        return self.update_component(node_id, ComponentPatch(props={**node.props, **values}))

    def update_styles(self, node_id: str, values: Dict[str, Any]) -> Optional[ComponentNode]:
        """Merge ``values`` into the node's styles."""
        node = self.get_component(node_id)
        if node is None:
            return None
        return self.update_component(node_id, ComponentPatch(styles={**node.styles, **values}))

    def delete_component(self, node_id: str) -> bool:
        """Delete a node and its subtree; clears the selection if it went with it."""
        deleted = self._commit(tree.delete_node(self.components, node_id))
        if deleted:
            logger.debug(f"Deleted {node_id}")
        return deleted

    def move_component(self, from_index: int, to_index: int, parent_id: Optional[str] = None) -> bool:
        return self._commit(tree.move_node(self.components, from_index, to_index, parent_id))

    def relocate_component(
        self,
        node_id: str,
        parent_id: Optional[str] = None,
        index: Optional[int] = None,
    ) -> bool:
        return self._commit(tree.relocate_node(self.components, node_id, parent_id, index))

    def duplicate_component(self, node_id: str) -> Optional[ComponentNode]:
        """Duplicate a node; returns the clone."""
        if not self._commit(tree.duplicate_node(self.components, node_id, self.id_factory)):
            return None
        parent_id, index = tree.find_location(self.components, node_id)
        siblings = tree.find_siblings(self.components, parent_id)
        return siblings[index + 1]

    # --- Drag and drop ----------------------------------------------------

    @property
    def is_dragging(self) -> bool:
        return self.drag.is_dragging

    def start_drag(self, source: Union[PaletteSource, NodeSource]) -> None:
        self.drag.start(source)

    def cancel_drag(self) -> None:
        self.drag.cancel()

    def end_drag(
        self,
        target: Optional[Union[CanvasTarget, ContainerTarget, RootSentinel]],
    ) -> Optional[DropIntent]:
        """
        Finish the open drag against the current page.

        Returns:
            The applied intent, or None when the drop changed nothing
        """
        if self.current_page is None:
            self.drag.cancel()
            return None

        intent = self.drag.end(target, self.components)
        components = apply_intent(self.components, intent)

        select = None
        if isinstance(intent, (InsertIntent, AppendIntent)):
            select = intent.node
        elif isinstance(intent, RelocateIntent):
            select = tree.find_node(components, intent.node_id)

        if not self._commit(components, select=select):
            return None
        return intent


@lru_cache(maxsize=1)
def get_builder_service() -> BuilderService:
    """Process-wide builder session used by the MCP tools."""
    service = BuilderService()
    service.load_project()
    return service
