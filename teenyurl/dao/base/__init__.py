from teenyurl.dao.base.link_base_dao import LinkBaseDAO, LINK_FIELDS


__all__ = ['LinkBaseDAO', 'LINK_FIELDS']
