#!/usr/bin/env python
"""tileshelf-server.py will serve your tiles.

This script is intended to be run directly from the command line.

It is intended for local testing of a vector tile pipeline, with a renderer
such as Mapbox GL or MapLibre pointed at it.

Serve a tileset along with any static files in ./static:

    tileshelf-server.py oxfordshire.mbtiles

Serve a tileset along with a few named files only:

    tileshelf-server.py oxfordshire.mbtiles -f style.json -f sprites.png

Or put the same settings in a JSON configuration file:

    tileshelf-server.py -c tileshelf.cfg

By default tiles are served on http://127.0.0.1:8080/, so you can open a url
like:

    http://localhost:8080/14/8124/5421.pbf

Check tileshelf-server.py --help to change these defaults.
"""

if __name__ == '__main__':
    from optparse import OptionParser
    import logging
    import os, sys

    parser = OptionParser(usage='%prog [options] [tileset.mbtiles]')
    parser.add_option("-c", "--config", dest="file",
        help="the path to a tileshelf config, instead of a tileset")
    parser.add_option("-i", "--ip", dest="ip", default="127.0.0.1",
        help="the IP address to listen on")
    parser.add_option("-p", "--port", dest="port", type="int", default=8080,
        help="the port number to listen on")
    parser.add_option("-s", "--static", dest="static", default=None,
        help="directory of static files to serve, default ./static if it exists")
    parser.add_option("-f", "--file", dest="files", action="append", default=[],
        help="serve just this static file, may be repeated")
    parser.add_option("--max-age", dest="max_age", type="int", default=604800,
        help="seconds for the Cache-Control header, 0 to disable caching")
    parser.add_option("--processes", dest="processes", type="int", default=1,
        help="number of forked worker processes")
    parser.add_option("--threaded", dest="threaded", action="store_true", default=False,
        help="handle each request in a new thread")
    parser.add_option("--logging", dest="logging", default="info",
        help="one of debug, info, warning, error or critical")
    (options, args) = parser.parse_args()

    if options.threaded and options.processes > 1:
        parser.error("Pick one of --threaded or --processes.")

    from werkzeug.serving import run_simple
    import TileShelf

    if options.file:
        if not os.path.exists(options.file):
            print("Config file not found. Use -c to pick a tileshelf config file.", file=sys.stderr)
            sys.exit(1)

        config = options.file

    elif len(args) == 1:
        config = {"tileset": args[0], "maximum cache age": options.max_age,
                  "logging": options.logging}

        if options.files:
            config["static"] = {"files": options.files}

        elif options.static or os.path.isdir('static'):
            config["static"] = {"path": options.static or 'static'}

    else:
        parser.error("Give me one tileset, or a config file with -c.")

    try:
        app = TileShelf.WSGITileServer(config)
    except TileShelf.Core.KnownUnknown as e:
        print("Error loading TileShelf: %s" % e, file=sys.stderr)
        sys.exit(1)

    logging.info('Serving %s on http://%s:%d/', app.config.store.filename, options.ip, options.port)
    run_simple(options.ip, options.port, app, threaded=options.threaded, processes=options.processes)
