""" Optional stylesheet compilation for static assets.

Map styles are JSON documents, but they're tedious to write by hand. A
stylesheet transform lets TileShelf answer a request for a JSON style by
compiling some other source file that sits among the static assets.

Transforms are chosen in configuration, and are entirely optional:

    "stylesheets": {"name": "yaml"}

compiles "style.yaml" (or "style.yml") into "style.json" using PyYAML.

    "stylesheets": {"class": "Module.Submodule:Classname", "kwargs": {...}}

loads any other transform. A transform is an object with one method:

    transform(path, assets):
      Return a (mimetype, body bytes) tuple for a request path, or None if
      this transform has nothing to say about it. The assets argument is
      the configured collection from TileShelf.Assets.

If a transform can't be loaded, for example because PyYAML isn't installed,
a warning is logged and TileShelf carries on without it: requests for the
compiled files simply aren't found.
"""

import logging
from json import dumps as json_dumps

from .Core import KnownUnknown, loadClassPath

class YAMLStylesheet:
    """ Compile YAML style sources into JSON.
    """
    extensions = ('yaml', 'yml')

    def __init__(self):
        import yaml
        self.yaml = yaml

    def sources(self, path):
        """ Possible source paths for a JSON path, in order of preference.
        """
        if not path.endswith('.json'):
            return []

        base = path[:-len('.json')]
        return ['%s.%s' % (base, ext) for ext in self.extensions]

    def transform(self, path, assets):
        for source in self.sources(path):
            body = assets.resolve(source)

            if body is None:
                continue

            try:
                style = self.yaml.safe_load(body)
            except self.yaml.YAMLError as e:
                logging.warning('TileShelf.Stylesheets.YAMLStylesheet.transform() could not parse %s: %s', source, e)
                return None

            try:
                body = json_dumps(style).encode('utf8')
            except (TypeError, ValueError) as e:
                # dates, sets and other YAML values with no JSON form
                logging.warning('TileShelf.Stylesheets.YAMLStylesheet.transform() could not convert %s: %s', source, e)
                return None

            logging.debug('TileShelf.Stylesheets.YAMLStylesheet.transform() compiled %s', source)
            return 'application/json', body

        return None

_transforms = {'yaml': YAMLStylesheet}

def getTransformByName(name):
    """ Retrieve a stylesheet transform class by name.
    """
    try:
        return _transforms[name.lower()]
    except KeyError:
        raise KnownUnknown('Unknown stylesheet transform: "%s". Try one of %s.' % (name, ', '.join(sorted(_transforms))))

def loadTransform(stylesheet_dict):
    """ Build a stylesheet transform from configuration, or return None.

        Unknown names are a configuration mistake and raise Core.KnownUnknown;
        a transform whose library or class can't be imported is only logged.
    """
    if not stylesheet_dict:
        return None

    if 'name' in stylesheet_dict:
        _class = getTransformByName(stylesheet_dict['name'])
        kwargs = {}

    elif 'class' in stylesheet_dict:
        try:
            _class = loadClassPath(stylesheet_dict['class'])
        except KnownUnknown as e:
            logging.warning('TileShelf.Stylesheets.loadTransform() disabled stylesheets: %s', e)
            return None

        kwargs = dict([(str(k), v) for (k, v) in stylesheet_dict.get('kwargs', {}).items()])

    else:
        raise KnownUnknown('Missing required stylesheet name or class: %s' % json_dumps(stylesheet_dict))

    try:
        transform = _class(**kwargs)
    except ImportError as e:
        logging.warning('TileShelf.Stylesheets.loadTransform() disabled stylesheets: %s', e)
        return None

    return transform
