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
"""A bobo wiki that keeps each page in a text file named after its title.
"""

# Public names:
__all__ = (
    'Application',
    'InvalidPath',
    'Page',
    'PageNotFound',
    'PageStore',
    'PersistenceFailure',
    'StartupFailure',
    'Templates',
    'Wiki',
    'extract_title',
    )

import bobo
import jinja2
import logging
import os
import re
import urllib.parse
import webob

log = logging.getLogger(__name__)

here = os.path.dirname(os.path.abspath(__file__))


class Page:
    """A titled unit of content

    The body is raw bytes.  Templates use ``text``, the body decoded
    as UTF-8.
    """

    def __init__(self, title, body=b''):
        self.title = title
        self.body = body

    @property
    def text(self):
        return self.body.decode('utf-8', 'replace')

    def __repr__(self):
        return '<Page %r (%d bytes)>' % (self.title, len(self.body))


class PageStore:
    """Pages kept as ``<title>.txt`` files in a directory

    The directory is created if it doesn't exist, but its parent
    must.

    There's no locking.  Concurrent saves of a page are
    last-writer-wins, and a load racing a save may see a partially
    written file.
    """

    suffix = '.txt'

    def __init__(self, directory):
        self.directory = os.path.abspath(directory)
        if not os.path.exists(self.directory):
            os.mkdir(self.directory)

    def path(self, title):
        return os.path.join(self.directory, title + self.suffix)

    def save(self, page):
        """Write a page's body, replacing any previous content

        New files are readable and writable by the owner only.
        PersistenceFailure is raised if the file can't be written.
        Whatever was written before a failure stays on disk.
        """
        try:
            fd = os.open(self.path(page.title),
                         os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with open(fd, 'wb') as f:
                f.write(page.body)
        except OSError as v:
            raise PersistenceFailure(page.title, v) from v

    def load(self, title):
        """Read a page

        PageNotFound is raised if the page file can't be read, for
        whatever reason.
        """
        try:
            with open(self.path(title), 'rb') as f:
                body = f.read()
        except OSError as v:
            raise PageNotFound(title, v) from v
        return Page(title, body)


_valid_path = re.compile(r'/(save|edit|view)/([a-zA-Z0-9]+)').fullmatch

def extract_title(path):
    """Return the page title named by a request path

    The path must have the form ``/<verb>/<title>`` where the verb is
    ``save``, ``edit`` or ``view`` and the title is one or more ASCII
    letters or digits.  Titles are used as file names, so anything
    else raises InvalidPath.
    """
    m = _valid_path(path)
    if m is None:
        raise InvalidPath(path)
    log.debug('%s %s', m.group(1), m.group(2))
    return m.group(2)

def valid_title(inst, request, func):
    """Resource check rejecting paths that don't name a page
    """
    try:
        extract_title(request.path_info)
    except InvalidPath as v:
        log.info("Rejected: %s", v)
        return _text_response(
            404, 'Invalid page path: ' + urllib.parse.quote(
                v.path.encode('utf-8')))


class Templates:
    """The parsed ``view`` and ``edit`` templates

    Templates are read from ``view.html`` and ``edit.html`` in the
    given directory, which defaults to the templates that come with
    txtwiki.  Both are parsed up front and a missing or invalid
    template raises StartupFailure.  The templates are rendered with
    a single ``page`` variable.
    """

    names = 'view', 'edit'

    def __init__(self, directory=None):
        self.directory = directory or here
        environment = jinja2.Environment(
            loader=jinja2.FileSystemLoader(self.directory),
            autoescape=True,
            undefined=jinja2.StrictUndefined,
            )
        templates = {}
        for name in self.names:
            try:
                templates[name] = environment.get_template(name + '.html')
            except jinja2.TemplateError as v:
                raise StartupFailure(
                    "Can't load the %s template from %s: %s"
                    % (name, self.directory, v)) from v
        self._templates = templates

    def render(self, name, page):
        return self._templates[name].render(page=page)


def _form_body(request):
    # Url-encoded forms are decoded as Latin-1, which maps each byte to
    # one character, so the posted bytes come back unchanged.
    if request.content_type == 'application/x-www-form-urlencoded':
        form = urllib.parse.parse_qs(
            request.body.decode('latin-1'), keep_blank_values=True,
            encoding='latin-1')
        return form.get('body', [''])[0].encode('latin-1')
    return request.POST.get('body', '').encode('utf-8')


class Wiki:
    """The wiki's resources

    The store and templates are shared by all requests.  Each request
    loads or builds its own Page.
    """

    # Searched in order; the first resource whose route matches wins.
    routes = 'view', 'edit', 'save'

    def __init__(self, store, templates):
        self.store = store
        self.templates = templates

    def resources(self):
        return [getattr(self, name) for name in self.routes]

    def render(self, name, page):
        try:
            return self.templates.render(name, page)
        except jinja2.TemplateError as v:
            log.error("Rendering %s for %r failed: %s", name, page.title, v)
            return _text_response(500, 'could not render page: %s' % v)

    @bobo.query('/view/:title', check=valid_title)
    def view(self, bobo_request, title):
        try:
            page = self.store.load(title)
        except PageNotFound as v:
            log.info("Not found: %s", v)
            return _text_response(404, 'could not find page.')
        return self.render('view', page)

    @bobo.query('/edit/:title', check=valid_title)
    def edit(self, bobo_request, title):
        # A missing page is edited as a new, empty one.
        try:
            page = self.store.load(title)
        except PageNotFound:
            page = Page(title)
        return self.render('edit', page)

    @bobo.post('/save/:title', check=valid_title)
    def save(self, bobo_request, title):
        page = Page(title, _form_body(bobo_request))
        try:
            self.store.save(page)
        except PersistenceFailure as v:
            log.error("Saving %r failed: %s", title, v)
            return _text_response(500, 'could not save page: %s' % v)
        return bobo.redirect('/view/' + title)


class Application(bobo.Application):
    """Create a WSGI application serving a wiki.

    Options are given as for bobo applications, typically as strings
    read from ConfigParser files.  The wiki's resources are used in
    place of the ``bobo_resources`` option.  The wiki options are:

    directory
       The directory pages are stored in.  It defaults to the current
       working directory and is created if it doesn't exist.

    templates
       The directory containing ``view.html`` and ``edit.html``
       templates, or a Templates object.  It defaults to the templates
       that come with txtwiki.

    StartupFailure is raised if the page directory can't be created
    or the templates can't be loaded.
    """

    def __init__(self, DEFAULT=None, **config):
        options = dict(DEFAULT or ())
        options.update(config)

        directory = options.get('directory') or '.'
        try:
            store = PageStore(directory)
        except OSError as v:
            raise StartupFailure(
                "Can't create the page directory %s: %s"
                % (directory, v)) from v

        templates = options.get('templates')
        if not isinstance(templates, Templates):
            templates = Templates(templates)

        self.wiki = Wiki(store, templates)
        options['bobo_resources'] = self.wiki.resources()
        bobo.Application.__init__(self, options)


def _text_response(status, message):
    response = webob.Response(status=status)
    response.content_type = 'text/plain; charset=UTF-8'
    response.text = message
    return response


class InvalidPath(Exception):
    """A request path doesn't name a page.
    """

    def __init__(self, path):
        self.path = path

    def __str__(self):
        return 'Invalid page path: %r' % self.path

class PageNotFound(Exception):
    """A page couldn't be read.
    """

    def __init__(self, title, error):
        self.title = title
        self.error = error

    def __str__(self):
        return '%s: %s' % (self.title, self.error)

class PersistenceFailure(Exception):
    """A page couldn't be written.
    """

    def __init__(self, title, error):
        self.title = title
        self.error = error

    def __str__(self):
        return str(self.error)

class StartupFailure(Exception):
    """The wiki can't be started.

    Raised when the page directory can't be created, the templates
    can't be loaded, or the server can't listen.
    """
