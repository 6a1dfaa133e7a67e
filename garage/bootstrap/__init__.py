from garage.bootstrap.container import AppContainer, build_container, get_container, set_container

__all__ = ["AppContainer", "build_container", "get_container", "set_container"]
