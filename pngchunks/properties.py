import logging


logger = logging.getLogger(__name__)


def get_root_from_chunk(instance):
    return get_instance_from_chunk(instance, condition=lambda x: x.father is None)


def get_instance_from_chunk(instance, condition):
    while not condition(instance):
        instance = instance.father

    return instance


class Dependency:
    '''This makes the relation between fields possible.

    In practice this class allows to write something like

        class Simple(Chunk):
            length = fields.StructField('I')
            data = fields.StringField(Dependency('.length'))

    and have the length of the string contained in the field named 'data'
    strictly connected to the field named 'length': unpacking reads the length
    from the sibling, setting a new value on 'data' writes back its length.

    The expression is resolved like a relative module path: the leading '.'
    indicates the father of the field, the following components are attribute
    names to traverse from there.
    '''
    def __init__(self, expression):
        if not expression.startswith('.'):
            raise ValueError(f'only relative expressions are supported, got \'{expression}\'')

        self.expression = expression

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.expression})>'

    def resolve_field(self, instance):
        # '.length'.split('.') -> ['', 'length']
        fields_path = self.expression.split('.')[1:]

        field = instance.father
        if field is None:
            raise AttributeError(f'field \'{instance.name}\' has no father to resolve {self!r}')

        for component_name in fields_path:
            field = getattr(field, component_name)

        logger.debug('resolved %r as field %s' % (self, field.__class__.__name__))

        return field

    def resolve(self, instance):
        '''With this method we resolve the attribute with respect to the instance
        passed as argument.'''
        return self.resolve_field(instance).value

    def resolve_and_set(self, instance, value):
        real_field = self.resolve_field(instance)
        real_field.value = value


class PropertyDescriptor(object):
    """This the glue for dependency management: the attribute can be
    a plain value or a Dependency, in which case is resolved at access time
    and written back on assignment."""

    def __init__(self, name: str, _type: type):
        self.name = name
        self.type = _type

    def __get__(self, instance, owner):
        if instance is None:
            return self

        data = instance.__dict__
        if self.name not in data:
            raise AttributeError(f"no '{self.name}' here!")

        value = data[self.name]

        if isinstance(value, Dependency):
            if instance.father is None:
                return instance.__dict__.get(f'_{self.name}_cache', 0)

            return value.resolve(instance)

        return value

    def __set__(self, instance, value):
        if not isinstance(value, (self.type, Dependency)):
            raise ValueError(f"A property must be of type {self.type} or a Dependency")

        data = instance.__dict__

        # the first time we add without thinking much
        if self.name not in data or isinstance(value, Dependency):
            data[self.name] = value
            return

        attribute = data[self.name]

        if not isinstance(attribute, Dependency):
            data[self.name] = value
            return

        # without a father we can only cache the value
        if instance.father is None:
            data[f'_{self.name}_cache'] = value
            return

        attribute.resolve_and_set(instance, value)
