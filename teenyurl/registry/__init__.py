from teenyurl.registry.link_registry import LinkRegistry, LinkOrder, LinkOverview


__all__ = ['LinkRegistry', 'LinkOrder', 'LinkOverview']
