"""
Route definitions for the OER viewer.

Endpoints:
- GET  /                    : the page (shell + resource list)
- GET  /api/oer/state       : current list state as JSON
- POST /oer/next            : load the next page
- POST /oer/previous        : load the previous page (no-op on page 1)
- POST /oer/refresh         : reload the current page
- POST /oer/toggle/{index}  : open/close a resource and resolve its metadata
- GET  /health              : liveness check

The action endpoints answer with a 303 redirect to ``/`` so that the
plain HTML forms of the page work without any script.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from .controller import ResourceListController
from .schemas import ListState
from .shell import Shell

router = APIRouter(tags=["oer"])


def get_shell(request: Request) -> Shell:
    return request.app.state.shell


def get_controller(shell: Shell = Depends(get_shell)) -> ResourceListController:
    return shell.controller


def _back_to_page() -> RedirectResponse:
    return RedirectResponse(url="/", status_code=303)


# Handlers are coroutines so that controller actions run on the event
# loop that owns the controller's requests.

@router.get("/", response_class=HTMLResponse)
async def index(shell: Shell = Depends(get_shell)) -> HTMLResponse:
    return HTMLResponse(shell.render())


@router.get("/api/oer/state", response_model=ListState)
async def read_state(controller: ResourceListController = Depends(get_controller)) -> ListState:
    return controller.state


@router.post("/oer/next")
async def next_page(controller: ResourceListController = Depends(get_controller)):
    controller.next_page()
    return _back_to_page()


@router.post("/oer/previous")
async def previous_page(controller: ResourceListController = Depends(get_controller)):
    controller.previous_page()
    return _back_to_page()


@router.post("/oer/refresh")
async def refresh(controller: ResourceListController = Depends(get_controller)):
    controller.refresh()
    return _back_to_page()


@router.post("/oer/toggle/{index}")
async def toggle(index: int, controller: ResourceListController = Depends(get_controller)):
    try:
        controller.toggle_expand(index)
    except IndexError:
        raise HTTPException(status_code=404, detail="Resource not found")
    return _back_to_page()


@router.get("/health")
async def health_check():
    return {"status": "ok"}
