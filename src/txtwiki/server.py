##############################################################################
#
# Copyright Zope Corporation and Contributors.
# All Rights Reserved.
#
# This software is subject to the provisions of the Zope Public License,
# Version 2.1 (ZPL).  A copy of the ZPL should accompany this distribution.
# THIS SOFTWARE IS PROVIDED "AS IS" AND ANY AND ALL EXPRESS OR IMPLIED
# WARRANTIES ARE DISCLAIMED, INCLUDING, BUT NOT LIMITED TO, THE IMPLIED
# WARRANTIES OF TITLE, MERCHANTABILITY, AGAINST INFRINGEMENT, AND FITNESS
# FOR A PARTICULAR PURPOSE.
#
##############################################################################
"""Serve a txtwiki application over HTTP.
"""

__all__ = (
    'make_server',
    'server',
    )

import boboserver
import logging
import optparse
import socketserver
import sys
import txtwiki
import wsgiref.simple_server

log = logging.getLogger(__name__)


class ThreadingWSGIServer(socketserver.ThreadingMixIn,
                          wsgiref.simple_server.WSGIServer):
    """Handle each request in its own thread
    """

    daemon_threads = True


class LoggingRequestHandler(wsgiref.simple_server.WSGIRequestHandler):

    def log_message(self, format, *args):
        log.info("%s - %s", self.address_string(), format % args)


def make_server(app, host, port):
    """Create a server listening on the given address

    StartupFailure is raised if the address can't be bound.
    """
    try:
        return wsgiref.simple_server.make_server(
            host, port, app,
            server_class=ThreadingWSGIServer,
            handler_class=LoggingRequestHandler,
            )
    except OSError as v:
        raise txtwiki.StartupFailure(
            "Can't listen on %s:%s: %s" % (host, port, v)) from v

def run_server(httpd):
    try:
        httpd.serve_forever()
    except KeyboardInterrupt:
        log.info("Interrupted")
    finally:
        httpd.server_close()


def server(args=None, Application=txtwiki.Application):
    """txtwiki development server

    The server function implements the ``txtwiki`` command.  It
    returns 1 without serving anything if the application can't be
    created or the address can't be bound.

    It is exported as a ``console_script`` entry point named ``txtwiki``.
    """

    if args is None:
        logging.basicConfig(level=logging.INFO)
        args = sys.argv[1:]

    parser = optparse.OptionParser("Usage: %prog [options] name=value ...")
    parser.add_option(
        '--host', '-H', dest='host', default='localhost',
        help="Specify the host name or address to listen on.")
    parser.add_option(
        '--port', '-p', type='int', dest='port', default=8080,
        help="Specify the port to listen on.")
    parser.add_option(
        '--directory', '-d', dest='directory',
        help="Specify the directory pages are stored in.")
    parser.add_option(
        '--templates', '-t', dest='templates',
        help="Specify a directory containing view.html and edit.html.")
    parser.add_option(
        '--debug', '-D', action='store_true', dest='debug',
        help="Run the post mortem debugger for uncaught exceptions.")

    options, pos = parser.parse_args(args)

    if [a for a in pos if '=' not in a]:
        sys.stderr.write(
            "Error:\nPositional arguments must be of the form name=value.\n\n")
        parser.parse_args(['-h'])

    app_options = dict(a.split('=', 1) for a in pos)
    for name in 'directory', 'templates':
        value = getattr(options, name)
        if value:
            app_options[name] = value
    if options.debug:
        app_options['bobo_handle_exceptions'] = 'false'

    try:
        application = app = Application(app_options)
        if options.debug:
            app = boboserver.Debug(app)
        httpd = make_server(app, options.host, options.port)
    except txtwiki.StartupFailure as v:
        log.critical("%s", v)
        sys.stderr.write("Error:\n%s\n" % v)
        return 1

    print("Serving %s on %s:%s..." % (
        application.wiki.store.directory, options.host, httpd.server_port))
    run_server(httpd)
    return 0
