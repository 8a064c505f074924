# sales_dashboard/stores/__init__.py
from importlib import import_module


def get_store(config):
    backend = config['store']['backend']
    store_path = config['store_backends'][backend]
    module_name, cls_name = store_path.rsplit('.', 1)
    mod = import_module(module_name)
    return getattr(mod, cls_name).from_config(config)
