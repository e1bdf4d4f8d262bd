"""Confluence implementation of the RemoteStore interface.

Pages are written in storage format. The ownership metadata of each page
(repository, identity key, content digest) is kept in a content property
so it survives edits made in the Confluence UI.
"""

import logging
from typing import Any, Dict, Optional

from src.confluence_client.api_wrapper import APIWrapper

from .models import LocalNode, PageMeta, RemoteNode

logger = logging.getLogger(__name__)

META_PROPERTY = "confluence_publish_meta"


class ConfluenceStore:
    """Pages of one Confluence space, seen through APIWrapper.

    Example:
        >>> store = ConfluenceStore(APIWrapper(Authenticator()), "DOCS")
        >>> home = store.find_page("Widgets")
    """

    def __init__(self, api: APIWrapper, space_key: str):
        self._api = api
        self.space_key = space_key

    def find_page(self, title: str) -> Optional[RemoteNode]:
        data = self._api.get_page_by_title(self.space_key, title, expand="version,ancestors")
        if not data:
            logger.debug(f'No page titled "{title}" in space {self.space_key}')
            return None

        page_id = str(data['id'])
        ancestors = data.get('ancestors') or []
        prop = self._api.get_page_property(page_id, META_PROPERTY)
        return RemoteNode(
            page_id=page_id,
            title=data.get('title', title),
            meta=PageMeta.from_dict((prop or {}).get('value')),
            parent_id=str(ancestors[-1]['id']) if ancestors else None,
            version=_version_number(data),
        )

    def get_child_pages(self, parent_id: Optional[str]) -> Dict[str, RemoteNode]:
        if parent_id is None:
            return {}

        children: Dict[str, RemoteNode] = {}
        for data in self._api.get_child_pages(
            parent_id,
            expand=f"version,metadata.properties.{META_PROPERTY}",
        ):
            properties = (data.get('metadata') or {}).get('properties') or {}
            node = RemoteNode(
                page_id=str(data['id']),
                title=data.get('title', ''),
                meta=PageMeta.from_dict((properties.get(META_PROPERTY) or {}).get('value')),
                parent_id=str(parent_id),
                version=_version_number(data),
            )
            key = node.key
            if node.meta is None:
                logger.debug(f"Page [{node.page_id}] {node.title} has no publish metadata")
            elif key in children:
                # Left over from an interrupted run; an unclaimed key gets it swept
                logger.warning(
                    f"Page [{node.page_id}] {node.title} duplicates {key} "
                    f"of page [{children[key].page_id}], it will be removed"
                )
                key = f"page:{node.page_id}"
            children[key] = node
        logger.debug(f"Found {len(children)} child page(s) under {parent_id}")
        return children

    def create_or_update_page(
        self,
        local: LocalNode,
        parent_id: Optional[str],
        remote: Optional[RemoteNode] = None,
    ) -> RemoteNode:
        meta = local.meta

        if remote is None:
            data = self._api.create_page(
                space=self.space_key,
                title=local.title,
                body=local.body,
                parent_id=parent_id,
            )
            page_id = str(data['id'])
            self._api.set_page_property(page_id, META_PROPERTY, meta.to_dict())
            logger.info(f"Created page: [{page_id}] {local.title}")
            return RemoteNode(page_id, local.title, meta, parent_id, _version_number(data))

        if remote.in_sync_with(local, parent_id):
            logger.debug(f"Page [{remote.page_id}] {local.title} is up to date")
            return remote

        data = self._api.update_page(
            page_id=remote.page_id,
            title=local.title,
            body=local.body,
            parent_id=parent_id,
        )
        if remote.meta != meta:
            self._api.set_page_property(remote.page_id, META_PROPERTY, meta.to_dict())
        logger.info(f"Updated page: [{remote.page_id}] {local.title}")
        return RemoteNode(
            remote.page_id,
            local.title,
            meta,
            parent_id or remote.parent_id,
            _version_number(data, default=remote.version + 1),
        )

    def delete_page(self, page_id: str) -> None:
        self._api.delete_page(page_id)
        logger.info(f"Deleted page: [{page_id}]")


def _version_number(data: Optional[Dict[str, Any]], default: int = 1) -> int:
    version = (data or {}).get('version') or {}
    try:
        return int(version.get('number', default))
    except (TypeError, ValueError):
        return default
